from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

DEFAULT_SAMPLE_SIZE = 100
DEFAULT_IDS_COUNT = 100
DEFAULT_APP_NAME = "mongocompare"
ALWAYS_IGNORED_INDEX_OPTIONS: Tuple[str, ...] = ("background",)

_CONNECTION_FIELDS = ("uri", "username", "password", "database", "collection")
_CONNECTION_ALIASES = {
    "uri": ("uri", "URI", "url"),
    "username": ("username", "user", "Username"),
    "password": ("password", "Password"),
    "database": ("database", "db", "Database"),
    "collection": ("collection", "collName", "CollName", "coll"),
}


def _first(cfg: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = cfg.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_int(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _as_bool(value: Any) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_names(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(item).strip() for item in value if str(item).strip())


@dataclass(frozen=True)
class ConnectionSettings:
    """Where one side of the comparison lives."""

    uri: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    database: Optional[str] = None
    collection: Optional[str] = None

    @staticmethod
    def from_config(config: Optional[Mapping[str, Any]]) -> "ConnectionSettings":
        cfg = dict(config or {})
        values = {name: _first(cfg, *_CONNECTION_ALIASES[name]) for name in _CONNECTION_FIELDS}
        return ConnectionSettings(**{k: (str(v) if v is not None else None) for k, v in values.items()})

    def overlay(self, **values: Optional[str]) -> "ConnectionSettings":
        """Return a copy where every non-empty value replaces the current one."""
        updates = {key: value for key, value in values.items() if value not in (None, "")}
        return replace(self, **updates) if updates else self

    @property
    def namespace(self) -> str:
        return f"{self.database}.{self.collection}"

    def missing_fields(self) -> List[str]:
        return [name for name in ("uri", "database", "collection") if not getattr(self, name)]

    def client_kwargs(self, app_name: str) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"appname": app_name}
        if self.username:
            kwargs["username"] = self.username
            kwargs["password"] = self.password or ""
        return kwargs


@dataclass(frozen=True)
class CompareConfig:
    """Immutable run configuration, merged once from file, environment and flags."""

    source: ConnectionSettings = field(default_factory=ConnectionSettings)
    target: ConnectionSettings = field(default_factory=ConnectionSettings)
    sample_size: int = DEFAULT_SAMPLE_SIZE
    first_ids_count: int = DEFAULT_IDS_COUNT
    last_ids_count: int = DEFAULT_IDS_COUNT
    ignored_index_options: Tuple[str, ...] = ALWAYS_IGNORED_INDEX_OPTIONS
    missing_document_fatal: bool = False
    app_name: str = DEFAULT_APP_NAME
    job_name: str = DEFAULT_APP_NAME
    log_file: Optional[str] = None

    @staticmethod
    def from_config(config: Optional[Mapping[str, Any]]) -> "CompareConfig":
        cfg = dict(config or {})
        checks = dict(cfg.get("checks") or {})
        runtime = dict(cfg.get("runtime") or {})
        sample_size = _as_int(_first(checks, "random_sample_size", "randomSampleSize", "sample_size"), "random_sample_size")
        first_ids = _as_int(_first(checks, "first_ids_count", "firstIdsCount"), "first_ids_count")
        last_ids = _as_int(_first(checks, "last_ids_count", "lastIdsCount"), "last_ids_count")
        missing_fatal = _as_bool(_first(checks, "missing_document_fatal", "missingDocumentFatal"))
        ignored = _as_names(_first(checks, "ignored_index_options", "ignoredIndexOptions"))
        return CompareConfig(
            source=ConnectionSettings.from_config(cfg.get("source")),
            target=ConnectionSettings.from_config(cfg.get("target")),
            sample_size=sample_size if sample_size is not None else DEFAULT_SAMPLE_SIZE,
            first_ids_count=first_ids if first_ids is not None else DEFAULT_IDS_COUNT,
            last_ids_count=last_ids if last_ids is not None else DEFAULT_IDS_COUNT,
            ignored_index_options=merge_ignored_options(ignored),
            missing_document_fatal=bool(missing_fatal),
            app_name=str(runtime.get("app_name") or runtime.get("appName") or DEFAULT_APP_NAME),
            job_name=str(runtime.get("job_name") or runtime.get("jobName") or DEFAULT_APP_NAME),
            log_file=runtime.get("log_file") or runtime.get("logFile"),
        )

    @staticmethod
    def from_sources(
        args: Any = None,
        env: Optional[Mapping[str, str]] = None,
        file_config: Optional[Mapping[str, Any]] = None,
    ) -> "CompareConfig":
        """Merge sources with precedence: flag > environment variable > config file > default."""
        env = os.environ if env is None else env
        base = CompareConfig.from_config(file_config)

        def pick(arg_name: str, env_name: str) -> Any:
            value = getattr(args, arg_name, None) if args is not None else None
            if value is None or value == "":
                value = env.get(env_name)
            return value

        sides = {}
        for side in ("source", "target"):
            prefix = side.upper()
            sides[side] = getattr(base, side).overlay(
                **{name: pick(f"{side}_{name}", f"{prefix}_{name.upper()}") for name in _CONNECTION_FIELDS}
            )

        sample_size = _as_int(pick("random_sample_size", "RANDOM_SAMPLE_SIZE"), "random_sample_size")
        first_ids = _as_int(pick("first_ids_count", "FIRST_IDS_COUNT"), "first_ids_count")
        last_ids = _as_int(pick("last_ids_count", "LAST_IDS_COUNT"), "last_ids_count")
        missing_fatal = _as_bool(pick("missing_document_fatal", "MISSING_DOCUMENT_FATAL"))
        ignored = _as_names(pick("ignored_index_options", "IGNORED_INDEX_OPTIONS"))
        log_file = pick("log_file", "MONGOCOMPARE_LOG_FILE")
        return replace(
            base,
            source=sides["source"],
            target=sides["target"],
            sample_size=sample_size if sample_size is not None else base.sample_size,
            first_ids_count=first_ids if first_ids is not None else base.first_ids_count,
            last_ids_count=last_ids if last_ids is not None else base.last_ids_count,
            missing_document_fatal=missing_fatal if missing_fatal is not None else base.missing_document_fatal,
            ignored_index_options=merge_ignored_options(ignored) if ignored else base.ignored_index_options,
            log_file=log_file or base.log_file,
        )

    def clone_with(
        self,
        *,
        sample_size: Optional[int] = None,
        first_ids_count: Optional[int] = None,
        last_ids_count: Optional[int] = None,
        ignored_index_options: Optional[Sequence[str]] = None,
        missing_document_fatal: Optional[bool] = None,
    ) -> "CompareConfig":
        return replace(
            self,
            sample_size=sample_size if sample_size is not None else self.sample_size,
            first_ids_count=first_ids_count if first_ids_count is not None else self.first_ids_count,
            last_ids_count=last_ids_count if last_ids_count is not None else self.last_ids_count,
            ignored_index_options=(
                merge_ignored_options(ignored_index_options) if ignored_index_options is not None else self.ignored_index_options
            ),
            missing_document_fatal=(
                missing_document_fatal if missing_document_fatal is not None else self.missing_document_fatal
            ),
        )


def merge_ignored_options(names: Iterable[str]) -> Tuple[str, ...]:
    merged = list(ALWAYS_IGNORED_INDEX_OPTIONS)
    for name in names:
        if name not in merged:
            merged.append(name)
    return tuple(merged)


def validate_config(config: CompareConfig) -> None:
    problems: List[str] = []
    for side in ("source", "target"):
        settings: ConnectionSettings = getattr(config, side)
        for name in settings.missing_fields():
            env_name = f"{side.upper()}_{name.upper()}"
            problems.append(f"{side}.{name} (set --{side}-{name} or environment variable {env_name})")
    if problems:
        raise ValueError("Missing configuration: " + "; ".join(problems))
    if "background" not in config.ignored_index_options:
        raise ValueError("ignored_index_options must always contain 'background'")


__all__ = [
    "ALWAYS_IGNORED_INDEX_OPTIONS",
    "CompareConfig",
    "ConnectionSettings",
    "DEFAULT_IDS_COUNT",
    "DEFAULT_SAMPLE_SIZE",
    "merge_ignored_options",
    "validate_config",
]
