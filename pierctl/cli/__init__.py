"""Command line interface for pierctl"""
