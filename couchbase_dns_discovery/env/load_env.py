import os
from typing import Callable, Dict, Iterable, Tuple, TypeVar

from dotenv import dotenv_values

from .env import Env, PrimaryType

T = TypeVar("T", bound=Env)


def _convert(
    items: Iterable[Tuple[str, str | None]],
    envars: Dict[str, Callable[[str], PrimaryType]],
) -> Dict[str, PrimaryType]:
    return {
        envar_name: envars[envar_name](envar_value)
        for envar_name, envar_value in items
        if envar_name in envars and envar_value
    }


def load_env(default: type[T], env_file: str | None = None, override: T | None = None) -> T:
    """
    Build an Env from the process environment, then the env file
    (".env" unless given), then the fields explicitly set on override.
    Later sources win. Unknown and empty values are ignored.
    """
    envars = default.types_map()

    if env_file is None:
        env_file = ".env"

    values = _convert(
        ((envar_name, os.getenv(envar_name)) for envar_name in envars),
        envars,
    )

    if os.path.exists(env_file):
        values.update(
            _convert(dotenv_values(dotenv_path=env_file).items(), envars)
        )

    if override is None:
        return default(**values)

    values.update(override.model_dump(exclude_none=True, exclude_unset=True))

    return type(override)(**values)
