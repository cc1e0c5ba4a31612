"""Argument parser for Tempify CLI."""

import argparse

from core.constants import VERSION, __copyright__


def build_arg_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="tempify",
        description="Render, save and manage Tempify designs"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}\n{__copyright__}"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show informational log messages on the console"
    )
    parser.add_argument(
        "--api-url",
        help="Backend root URL (default: config api_base_url or TEMPIFY_API_URL)"
    )

    # Authentication
    auth_group = parser.add_argument_group("authentication")
    auth_group.add_argument(
        "--login",
        metavar="EMAIL",
        help="Log in and store the session token in the config file"
    )
    auth_group.add_argument(
        "--password",
        help="Password for --login"
    )
    auth_group.add_argument(
        "--logout",
        action="store_true",
        help="Forget the stored session token"
    )

    # Actions
    action_group = parser.add_argument_group("actions")
    action_group.add_argument(
        "--render",
        metavar="DESIGN_JSON",
        help="Render a local design file to an image"
    )
    action_group.add_argument(
        "--list-designs",
        action="store_true",
        help="List your saved designs"
    )
    action_group.add_argument(
        "--delete-design",
        metavar="ID",
        help="Delete a saved design"
    )
    action_group.add_argument(
        "--export-saved",
        metavar="ID",
        help="Download a saved design and render it to an image"
    )
    action_group.add_argument(
        "--gui",
        action="store_true",
        help="Launch the graphical design editor"
    )
    action_group.add_argument(
        "--template",
        metavar="ID",
        help="Template to open when launching the editor"
    )

    # Export options
    export_group = parser.add_argument_group("export options")
    export_group.add_argument(
        "-o", "--out",
        default=".",
        help="Output directory for rendered images (default: current directory)"
    )
    export_group.add_argument(
        "--format",
        choices=["png", "jpeg", "jpg"],
        default="png",
        help="Output image format (default: png)"
    )
    export_group.add_argument(
        "--name",
        help="Design name used for the output file name"
    )
    export_group.add_argument(
        "--size",
        metavar="WxH",
        help="Output size in pixels (default: config export size, 800x600)"
    )

    return parser
