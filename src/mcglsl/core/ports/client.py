from typing import Protocol

from mcglsl.models import Diagnostic


class DiagnosticsClient(Protocol):
    def publish_diagnostics(self, uri: str, diagnostics: list[Diagnostic], version: int | None = None) -> None: ...

    def show_error(self, message: str) -> None: ...
