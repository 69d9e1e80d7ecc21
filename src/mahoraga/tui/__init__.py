"""Textual front end for the prompt analyzer."""

from __future__ import annotations
