"""Shared CLI state: the loaded configuration and the host it points at."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from packagesetup.config import SetupConfig
from packagesetup.host import HostServices
from packagesetup.local_host import LocalHost


@dataclass
class CliState:
    """Values set by the global options."""

    config: SetupConfig
    home: Path

    def host(self) -> HostServices:
        return LocalHost.create(self.home)


def get_state(ctx: typer.Context) -> CliState:
    """Get the state stored by the main callback."""
    state: Optional[CliState] = ctx.find_root().obj
    if state is None:
        raise RuntimeError("CLI state not initialized")
    return state
