from __future__ import annotations

import click


class RocActionError(click.ClickException):
    """Fatal failure; click prints ``Error: <message>`` and exits with status 1."""


class MissingInputError(RocActionError):
    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        joined = ", ".join(self.names)
        super().__init__(f"Input required and not supplied: {joined}")


class StagingError(RocActionError):
    pass


class LaunchError(RocActionError):
    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class InvalidInputError(RocActionError):
    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        super().__init__(f"Invalid value for input {name}: {detail}")
