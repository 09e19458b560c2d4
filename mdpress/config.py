"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE
from .highlighting import theme_exists
from .models import InsertAnchor


@dataclass
class RenderConfig:
    """Configuration for rendering Markdown documents.

    Attributes:
        highlight_code: Whether fenced code blocks are syntax highlighted.
        highlight_theme: Name of the Pygments style used for highlighting.
        insert_anchor: Anchor link placement: ``"left"``, ``"right"`` or
            ``"none"``.
        preserve_unicode: Whether to keep Unicode characters in header ids.
        template_dirs: Directories searched for templates before the built-in
            ones.
        indent_chars: Characters used to indent nested table-of-contents entries.
        indent_spaces: Number of spaces used for indentation; overrides
            `indent_chars` when set.
        list_style: Bullet style for table-of-contents entries (``"1."``,
            ``"*"``, ``"-"``, or aliases ``"ordered"``/``"unordered"``).
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        RenderConfig(highlight_code=True, insert_anchor="right")
    """

    # Rendering
    highlight_code: bool = False
    highlight_theme: str = "monokai"
    insert_anchor: str = "none"
    preserve_unicode: bool = False
    template_dirs: tuple[str, ...] = ()

    # Table of contents listing
    indent_chars: str = "    "
    indent_spaces: int | None = None
    list_style: str = "1."

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`insert_anchor` must be one of: left, right, none")
    """


def load_config(search_path: Path) -> RenderConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.mdpress]`` table from `pyproject.toml` and the ``[mdpress]`` or
    ``[tool.mdpress]`` table from `.mdpress.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        RenderConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("content"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "mdpress")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".mdpress.toml",
            table_paths=[("mdpress",), ("tool", "mdpress")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return RenderConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> RenderConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> RenderConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return RenderConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return RenderConfig()

    try:
        return RenderConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: RenderConfig) -> RenderConfig:
    indent_chars = config.indent_chars
    if config.indent_spaces is not None:
        _ensure_integers({"indent_spaces": config.indent_spaces})
        if config.indent_spaces <= 0:
            raise ConfigError("`indent_spaces` must be a positive integer")
        indent_chars = " " * config.indent_spaces

    list_style = config.list_style
    if list_style == "ordered":
        list_style = "1."
    elif list_style == "unordered":
        list_style = "-"

    insert_anchor = config.insert_anchor
    if isinstance(insert_anchor, str):
        insert_anchor = insert_anchor.strip().lower()

    template_dirs = config.template_dirs
    if isinstance(template_dirs, (list, tuple)):
        template_dirs = tuple(str(directory) for directory in template_dirs)
    elif isinstance(template_dirs, str):
        template_dirs = (template_dirs,)

    return replace(
        config,
        indent_chars=indent_chars,
        list_style=list_style,
        insert_anchor=insert_anchor,
        template_dirs=template_dirs,
    )


def validate_config(config: RenderConfig) -> None:
    """Validate a `RenderConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the anchor policy or highlight theme is unknown, flags
            are not booleans, formatting fields are empty or unsupported, or
            numeric limits are non-positive.

    Examples:
        validate_config(RenderConfig(highlight_code=True, highlight_theme="monokai"))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "max_file_size": config.max_file_size,
            **({"indent_spaces": config.indent_spaces} if config.indent_spaces is not None else {}),
        }
    )

    for name in ("highlight_code", "preserve_unicode"):
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    if config.insert_anchor not in {policy.value for policy in InsertAnchor}:
        raise ConfigError("`insert_anchor` must be one of: left, right, none")
    if not isinstance(config.highlight_theme, str) or not theme_exists(config.highlight_theme):
        raise ConfigError(f"`highlight_theme` {config.highlight_theme!r} is not a known theme")
    if not isinstance(config.template_dirs, tuple):
        raise ConfigError("`template_dirs` must be a list of directories")

    if not config.indent_chars:
        raise ConfigError("`indent_chars` must not be empty")
    if config.list_style not in ("1.", "*", "-"):
        raise ConfigError("`list_style` must be one of: 1., *, -, ordered, unordered")

    _ensure_positive({"max_file_size": config.max_file_size})


def apply_overrides(config: RenderConfig, **overrides: object) -> RenderConfig:
    """Apply override values to a `RenderConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        RenderConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `RenderConfig`.

    Examples:
        updated = apply_overrides(config, insert_anchor="left", highlight_code=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "indent_chars" in changes and "indent_spaces" not in changes:
        changes["indent_spaces"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> RenderConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        RenderConfig: Validated configuration ready for rendering.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), insert_anchor="right")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
