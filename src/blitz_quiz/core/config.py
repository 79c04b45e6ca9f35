"""Configuration management for blitz-quiz.

Settings live in a single TOML document grouped by concern. Values are merged
over built-in defaults, unknown keys are rejected and every field is validated
before being frozen into dataclasses.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - should never happen
    raise RuntimeError("Python 3.11+ required for tomllib support") from exc

__all__ = [
    "CONFIG_PATH_ENV",
    "ConfigError",
    "OpenAIConfig",
    "ProvidersConfig",
    "GenerationConfig",
    "GameConfig",
    "StoreConfig",
    "LoggingConfig",
    "QuizConfig",
    "config_template",
    "default_config",
    "default_tree",
    "load_config",
    "resolve_config_path",
    "write_template",
]


CONFIG_PATH_ENV = "BLITZ_QUIZ_CONFIG"
DEFAULT_LOG_DIR = Path.home() / ".blitz-quiz" / "logs"


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class OpenAIConfig:
    model: str
    temperature: float
    request_timeout_seconds: int
    api_base: Optional[str]


@dataclass(frozen=True)
class ProvidersConfig:
    openai: OpenAIConfig


@dataclass(frozen=True)
class GenerationConfig:
    max_content_chars: int
    preview_chars: int
    default_question_count: int
    max_question_count: int


@dataclass(frozen=True)
class GameConfig:
    seconds_per_question: int
    base_points: int
    max_time_bonus: int
    tick_interval_seconds: float


@dataclass(frozen=True)
class StoreConfig:
    seed_demo: bool


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool
    directory: Path


@dataclass(frozen=True)
class QuizConfig:
    providers: ProvidersConfig
    generation: GenerationConfig
    game: GameConfig
    store: StoreConfig
    logging: LoggingConfig


def _deepcopy_defaults() -> Dict[str, Any]:
    return copy.deepcopy(_DEFAULTS)


def _merge_dict(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    for key, value in override.items():
        if key not in base:
            dotted = f"{path}{key}" if path else key
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                dotted = f"{path}{key}" if path else key
                raise ConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            _merge_dict(base_value, value, path=f"{path}{key}.")
        else:
            base[key] = value


def _require_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{field}' must be a positive integer.")
    return value


def _require_non_negative_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"'{field}' must be a non-negative integer.")
    return value


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_float_range(
    value: Any, *, field: str, min_value: float, max_value: float
) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{field}' must be a number.")
    number = float(value)
    if not (min_value <= number <= max_value):
        raise ConfigError(
            f"'{field}' must be between {min_value} and {max_value}."
        )
    return number


def _require_string(value: Any, *, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value.strip()


def _coerce_optional_string(value: Any, *, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string when set.")
    return value.strip()


def _coerce_log_dir(value: Any) -> Path:
    if value is None:
        return DEFAULT_LOG_DIR
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            "'logging.directory' must be a non-empty string when set."
        )
    return Path(value).expanduser().resolve()


def _require_table(tree: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = tree.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"{name} table must be a mapping.")
    return section


def _build_openai(section: Mapping[str, Any]) -> OpenAIConfig:
    model = _require_string(
        section.get("model"), field="providers.openai.model"
    )
    temperature = _require_float_range(
        section.get("temperature"),
        field="providers.openai.temperature",
        min_value=0.0,
        max_value=2.0,
    )
    request_timeout_seconds = _require_positive_int(
        section.get("request_timeout_seconds"),
        field="providers.openai.request_timeout_seconds",
    )
    api_base = _coerce_optional_string(
        section.get("api_base"), field="providers.openai.api_base"
    )
    return OpenAIConfig(
        model=model,
        temperature=temperature,
        request_timeout_seconds=request_timeout_seconds,
        api_base=api_base,
    )


def _build_providers(section: Mapping[str, Any]) -> ProvidersConfig:
    openai_section = section.get("openai")
    if not isinstance(openai_section, Mapping):
        raise ConfigError("providers.openai table is required.")
    return ProvidersConfig(openai=_build_openai(openai_section))


def _build_generation(section: Mapping[str, Any]) -> GenerationConfig:
    max_content_chars = _require_positive_int(
        section.get("max_content_chars"),
        field="generation.max_content_chars",
    )
    preview_chars = _require_non_negative_int(
        section.get("preview_chars"), field="generation.preview_chars"
    )
    default_question_count = _require_positive_int(
        section.get("default_question_count"),
        field="generation.default_question_count",
    )
    max_question_count = _require_positive_int(
        section.get("max_question_count"),
        field="generation.max_question_count",
    )
    if default_question_count > max_question_count:
        raise ConfigError(
            "generation.default_question_count must not exceed "
            "max_question_count."
        )
    return GenerationConfig(
        max_content_chars=max_content_chars,
        preview_chars=preview_chars,
        default_question_count=default_question_count,
        max_question_count=max_question_count,
    )


def _build_game(section: Mapping[str, Any]) -> GameConfig:
    seconds_per_question = _require_positive_int(
        section.get("seconds_per_question"),
        field="game.seconds_per_question",
    )
    base_points = _require_non_negative_int(
        section.get("base_points"), field="game.base_points"
    )
    max_time_bonus = _require_non_negative_int(
        section.get("max_time_bonus"), field="game.max_time_bonus"
    )
    tick_interval_seconds = _require_float_range(
        section.get("tick_interval_seconds"),
        field="game.tick_interval_seconds",
        min_value=0.001,
        max_value=60.0,
    )
    return GameConfig(
        seconds_per_question=seconds_per_question,
        base_points=base_points,
        max_time_bonus=max_time_bonus,
        tick_interval_seconds=tick_interval_seconds,
    )


def _build_store(section: Mapping[str, Any]) -> StoreConfig:
    seed_demo = _require_bool(
        section.get("seed_demo"), field="store.seed_demo"
    )
    return StoreConfig(seed_demo=seed_demo)


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = _require_string(
        section.get("level"), field="logging.level"
    ).upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if level not in allowed:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    directory = _coerce_log_dir(section.get("directory"))
    return LoggingConfig(level=level, verbose=verbose, directory=directory)


def _build_config(tree: Mapping[str, Any]) -> QuizConfig:
    return QuizConfig(
        providers=_build_providers(_require_table(tree, "providers")),
        generation=_build_generation(_require_table(tree, "generation")),
        game=_build_game(_require_table(tree, "game")),
        store=_build_store(_require_table(tree, "store")),
        logging=_build_logging(_require_table(tree, "logging")),
    )


def _load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> Optional[Path]:
    """Return the config path to read, or ``None`` to use defaults only."""

    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = env_map.get(CONFIG_PATH_ENV)
    if env_override and env_override.strip():
        return Path(env_override.strip()).expanduser().resolve()
    return None


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> QuizConfig:
    """Load the TOML config, applying defaults and validation."""

    tree = _deepcopy_defaults()
    path = resolve_config_path(explicit_path=explicit_path, env=env)
    if path is not None:
        toml_data = _load_toml(path)
        if not isinstance(toml_data, Mapping):
            raise ConfigError("Config TOML must contain a table at the root.")
        _merge_dict(tree, toml_data)
    return _build_config(tree)


def default_config() -> QuizConfig:
    """Return the validated built-in configuration."""

    return _build_config(_deepcopy_defaults())


def default_tree() -> Dict[str, Any]:
    """Return a copy of the default configuration tree."""

    return _deepcopy_defaults()


def config_template() -> str:
    """Return the TOML template recommended for new installs."""

    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(
    path: Path, *, overwrite: bool = False, mode: int = 0o600
) -> Path:
    """Write the default template to ``path``.

    Args:
        path: Destination TOML file.
        overwrite: When ``True`` existing files are replaced.
        mode: File permission bitmask to apply when supported.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    with path.open("w", encoding="utf-8") as fh:
        fh.write(config_template())
    try:
        path.chmod(mode)
    except PermissionError:
        pass
    return path


_DEFAULTS: Dict[str, Any] = {
    "providers": {
        "openai": {
            "model": "gpt-4o-mini",
            "temperature": 0.4,
            "request_timeout_seconds": 60,
            "api_base": None,
        },
    },
    "generation": {
        "max_content_chars": 5000,
        "preview_chars": 100,
        "default_question_count": 5,
        "max_question_count": 20,
    },
    "game": {
        "seconds_per_question": 15,
        "base_points": 1000,
        "max_time_bonus": 500,
        "tick_interval_seconds": 1.0,
    },
    "store": {
        "seed_demo": True,
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
        "directory": None,
    },
}


_CONFIG_TEMPLATE = """
# blitz-quiz configuration

[providers.openai]
# Chat model used to generate questions (must support structured outputs)
model = "gpt-4o-mini"
# Sampling temperature (0.0-2.0)
temperature = 0.4
# Abort a generation request after this many seconds
request_timeout_seconds = 60
# Optional API base override
# api_base = "https://api.openai.com/v1"

[generation]
# Notes beyond this many characters are dropped from the prompt
max_content_chars = 5000
# Characters of the notes kept as the module preview
preview_chars = 100
default_question_count = 5
# Upper bound on questions requested per module
max_question_count = 20

[game]
seconds_per_question = 15
# Points for a correct answer before the time bonus
base_points = 1000
# Bonus for answering instantly, scaled down linearly with elapsed time
max_time_bonus = 500
tick_interval_seconds = 1.0

[store]
# Start with the "Capital Cities" demo module
seed_demo = true

[logging]
level = "INFO"
verbose = false
# directory = "~/.blitz-quiz/logs"
"""
