"""Template processing utilities"""

import os
import string
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List


def render_template(template: str,
                    variables: Dict[str, Any],
                    safe: bool = True) -> str:
    """
    Render template with variables

    Placeholders use ``string.Template`` syntax (``${name}``).

    Args:
        template: Template string
        variables: Variables to substitute
        safe: Use safe substitution (ignore missing vars)

    Returns:
        Rendered string
    """
    context = {
        'NOW': datetime.now().isoformat(),
        'USER': os.environ.get('USER', 'unknown'),
        'HOME': str(Path.home()),
    }
    context.update({k: str(v) for k, v in variables.items()})

    tmpl = string.Template(template)

    if safe:
        return tmpl.safe_substitute(context)
    else:
        return tmpl.substitute(context)


def load_template(template_path: Path) -> str:
    """
    Load template from file

    Raises:
        FileNotFoundError: If template not found
    """
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    return template_path.read_text(encoding='utf-8')


def render_template_file(template_path: Path,
                         output_path: Path,
                         variables: Dict[str, Any]) -> Path:
    """Render one template file to ``output_path``"""
    content = render_template(load_template(template_path), variables)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding='utf-8')
    return output_path


def is_text_template(path: Path) -> bool:
    """Files rendered through the template engine, others are copied"""
    return path.suffix.lower() in {'.toml', '.yaml', '.yml', '.json', '.txt', '.conf', '.tpl'}


def list_template_files(template_dir: Path) -> List[Path]:
    """All files below a template directory, sorted"""
    return sorted(p for p in template_dir.rglob('*') if p.is_file())
