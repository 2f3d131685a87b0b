"""Persisted lifecycle state of pier instances"""

import json
import logging
from datetime import datetime
from typing import Optional

from ..constants import LifecycleState
from ..models.instance import PierInstance
from ..models.result import InstanceState

logger = logging.getLogger(__name__)

# Entries kept in the state file history
HISTORY_LIMIT = 20


class StateStore:
    """Reads and writes ``<instanceRepo>/.pier-state.json``

    The state is informational; lifecycle preconditions are still checked
    against the filesystem, so a missing or stale file never blocks a command.
    """

    def load(self, instance: PierInstance) -> Optional[InstanceState]:
        """Load the recorded state, None if absent or unreadable"""
        path = instance.state_file
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return InstanceState.from_dict(json.load(f))
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Ignoring unreadable state file {path}: {e}")
            return None

    def record(self,
               instance: PierInstance,
               state: LifecycleState,
               create: bool = True) -> Optional[InstanceState]:
        """
        Record a transition

        Args:
            instance: Pier instance
            state: New state
            create: Create the instance directory if missing

        Returns:
            Written state, or None when the directory is absent and create is off
        """
        if not instance.instance_repo.exists():
            if not create:
                return None
            instance.instance_repo.mkdir(parents=True, exist_ok=True)

        previous = self.load(instance)
        now = datetime.now().isoformat()
        history = list(previous.history) if previous else []
        history.append({"state": state.value, "at": now})

        entry = InstanceState(
            state=state,
            chain_type=instance.chain_type.value,
            mode=instance.mode.value,
            version=instance.version or (previous.version if previous else ""),
            updated_at=now,
            container_id=instance.container_id,
            history=history[-HISTORY_LIMIT:],
        )

        tmp_path = instance.state_file.with_suffix('.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(entry.to_dict(), f, indent=2)
        tmp_path.replace(instance.state_file)

        logger.debug(f"{instance.chain_type.value} pier state -> {state.value}")
        return entry
