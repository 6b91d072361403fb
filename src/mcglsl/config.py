import os

from pydantic import BaseModel

_DEFAULT_GLSLANG = "glslangValidator"
_DEFAULT_TIMEOUT = 10.0


class Settings(BaseModel):
    glslang_path: str = _DEFAULT_GLSLANG
    shaderpacks_path: str = ""
    validator_timeout: float = _DEFAULT_TIMEOUT

    def with_overrides(
        self,
        glslang_path: str | None = None,
        shaderpacks_path: str | None = None,
        validator_timeout: float | None = None,
    ) -> "Settings":
        updates: dict[str, object] = {}
        if glslang_path:
            updates["glslang_path"] = glslang_path
        if shaderpacks_path:
            updates["shaderpacks_path"] = shaderpacks_path
        if validator_timeout is not None:
            updates["validator_timeout"] = validator_timeout
        return self.model_copy(update=updates)


def load_settings() -> Settings:
    timeout = os.getenv("MCGLSL_VALIDATOR_TIMEOUT")
    return Settings(
        glslang_path=os.getenv("MCGLSL_GLSLANG_PATH", _DEFAULT_GLSLANG),
        shaderpacks_path=os.getenv("MCGLSL_SHADERPACKS_PATH", ""),
        validator_timeout=float(timeout) if timeout else _DEFAULT_TIMEOUT,
    )
