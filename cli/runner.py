"""CLI runner for Tempify."""

import logging
from pathlib import Path
from typing import Optional, Tuple

from core import ConfigManager, parse_canvas_size
from core.api_client import ApiError, ConfigCredentialProvider, TempifyApiClient
from core.design import DesignRasterizer, FontManager
from core.design.storage import load_design_file
from core.logging_config import ErrorLogger

logger = logging.getLogger(__name__)


def build_api_client(config: ConfigManager, api_url: Optional[str] = None) -> TempifyApiClient:
    """Create an API client using the stored token."""
    return TempifyApiClient(
        api_url or config.get_api_base_url(),
        ConfigCredentialProvider(config),
        timeout=config.get_request_timeout(),
    )


def build_rasterizer(config: ConfigManager) -> DesignRasterizer:
    return DesignRasterizer(
        font_manager=FontManager(custom_dirs=config.get_font_dirs()),
        canvas_size=config.get_export_size(),
        jpeg_quality=config.get_jpeg_quality(),
    )


def resolve_size(args, config: ConfigManager) -> Optional[Tuple[int, int]]:
    if getattr(args, "size", None):
        return parse_canvas_size(args.size)
    return config.get_export_size()


def handle_login(args, config: ConfigManager) -> int:
    if not args.password:
        print("--login requires --password")
        return 2
    client = build_api_client(config, args.api_url)
    try:
        token = client.login(args.login, args.password)
    except ApiError as e:
        print(f"Login failed: {e}")
        return 1
    config.set_auth_token(token)
    config.save()
    print(f"Logged in. Token saved to {config.config_path}")
    return 0


def handle_render(args, config: ConfigManager) -> int:
    """Render a local design file."""
    design_path = Path(args.render).expanduser()
    if not design_path.exists():
        print(f"Design file not found: {design_path}")
        return 2

    try:
        size = resolve_size(args, config)
        document, name, _ = load_design_file(design_path)
    except ValueError as e:
        print(f"Invalid input: {e}")
        return 2

    rasterizer = build_rasterizer(config)
    with ErrorLogger("design export", logger, reraise=False) as guard:
        out_path = rasterizer.export_to_file(
            document, Path(args.out).expanduser(), args.name or name, args.format, size
        )
    if guard.error is not None:
        print(f"Export failed: {guard.error}")
        return 1

    print(f"Saved: {out_path}")
    return 0


def handle_list_designs(args, config: ConfigManager) -> int:
    client = build_api_client(config, args.api_url)
    try:
        designs = client.list_saved_designs()
    except ApiError as e:
        print(f"Could not list designs: {e}")
        return 1

    if not designs:
        print("No saved designs")
        return 0
    for design in designs:
        updated = f"  ({design.updated_at})" if design.updated_at else ""
        print(f"{design.id}  {design.name}{updated}")
    return 0


def handle_delete_design(args, config: ConfigManager) -> int:
    client = build_api_client(config, args.api_url)
    try:
        client.delete_saved_design(args.delete_design)
    except ApiError as e:
        print(f"Could not delete design: {e}")
        return 1
    print(f"Deleted design {args.delete_design}")
    return 0


def handle_export_saved(args, config: ConfigManager) -> int:
    """Download a saved design and render it."""
    client = build_api_client(config, args.api_url)
    try:
        size = resolve_size(args, config)
    except ValueError as e:
        print(f"Invalid input: {e}")
        return 2

    try:
        saved = client.get_saved_design(args.export_saved)
    except ApiError as e:
        print(f"Could not load design: {e}")
        return 1

    rasterizer = build_rasterizer(config)
    with ErrorLogger("saved design export", logger, reraise=False) as guard:
        out_path = rasterizer.export_to_file(
            saved.document, Path(args.out).expanduser(), args.name or saved.name, args.format, size
        )
    if guard.error is not None:
        print(f"Export failed: {guard.error}")
        return 1

    print(f"Saved: {out_path}")
    return 0


def run_cli(args, config: Optional[ConfigManager] = None) -> int:
    """
    Run CLI with parsed arguments.

    Args:
        args: Parsed command-line arguments
        config: Configuration to use (loaded from disk if omitted)

    Returns:
        Exit code (0 for success)
    """
    config = config or ConfigManager()

    if getattr(args, "logout", False):
        config.set_auth_token(None)
        config.save()
        print("Logged out")
        return 0

    if getattr(args, "login", None):
        return handle_login(args, config)

    if getattr(args, "render", None):
        return handle_render(args, config)

    if getattr(args, "list_designs", False):
        return handle_list_designs(args, config)

    if getattr(args, "delete_design", None):
        return handle_delete_design(args, config)

    if getattr(args, "export_saved", None):
        return handle_export_saved(args, config)

    print("Nothing to do. Use --render, --list-designs, --gui or -h for help.")
    return 2
