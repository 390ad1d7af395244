"""
Operator CLI for listing, deleting and provisioning pixels.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from pixel_admin.config import get_backend_settings, get_deletion_settings
from pixel_admin.connectors.pixel_backend import PixelBackendClient
from pixel_admin.domain.deletion import DeletionAttempt, DeletionMode
from pixel_admin.errors import BulkDeletionError, FetchError, ProvisioningError
from pixel_admin.logging_utils import configure_logging
from pixel_admin.services.bulk_deletion import BulkDeletionService
from pixel_admin.services.deletion_workflow import DeletionWorkflowController
from pixel_admin.services.export import JsonFileExporter
from pixel_admin.services.listing import ALL_INDUSTRIES, SORT_KEYS, PixelListing
from pixel_admin.services.provisioning import PixelProvisioner


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage tracking pixels.")
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List pixels.")
    list_cmd.add_argument("--search", default="", help="Match client name or website.")
    list_cmd.add_argument("--industry", default=ALL_INDUSTRIES, help="Exact industry filter.")
    list_cmd.add_argument("--sort", default="date", choices=SORT_KEYS)

    delete_cmd = commands.add_parser("delete", help="Delete one pixel in stages.")
    delete_cmd.add_argument("pixel_id")
    save_group = delete_cmd.add_mutually_exclusive_group(required=True)
    save_group.add_argument("--save", dest="save", action="store_true", help="Export client data first.")
    save_group.add_argument("--no-save", dest="save", action="store_false", help="Delete without exporting.")
    delete_cmd.add_argument("--export-dir", default=None, help="Where exported JSON is written.")

    bulk_cmd = commands.add_parser("bulk-delete", help="Soft-delete several pixels (hard delete in 30 days).")
    bulk_cmd.add_argument("pixel_ids", nargs="+")

    generate_cmd = commands.add_parser("generate", help="Provision a pixel for a client.")
    generate_cmd.add_argument("client_name")
    generate_cmd.add_argument("website")

    return parser


def _record_payload(record) -> dict:
    return record.model_dump(mode="json", by_alias=True)


def _print_phase(attempt: DeletionAttempt) -> None:
    message = f" {attempt.message}" if attempt.message else ""
    print(f"[{attempt.phase.name}]{message}", file=sys.stderr)


def _cmd_list(args: argparse.Namespace, backend: PixelBackendClient) -> int:
    listing = PixelListing()
    try:
        listing.load(backend.list_pixels)
    except FetchError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    try:
        view = listing.view(args.search, args.industry, args.sort)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    print(json.dumps([_record_payload(record) for record in view], indent=2))
    return 0


def _cmd_delete(args: argparse.Namespace, backend: PixelBackendClient) -> int:
    listing = PixelListing()
    try:
        listing.load(backend.list_pixels)
    except FetchError as exc:
        print(f"warning: {exc}", file=sys.stderr)

    settings = get_deletion_settings()
    export_dir = Path(args.export_dir) if args.export_dir else settings.export_dir
    controller = DeletionWorkflowController(
        backend=backend,
        listing=listing,
        exporter=JsonFileExporter(export_dir),
        dismiss_delay_seconds=settings.dismiss_delay_seconds,
    )
    controller.subscribe(_print_phase)

    mode = DeletionMode.SAVE_AND_DELETE if args.save else DeletionMode.DELETE_ONLY
    controller.begin(args.pixel_id)
    attempt = controller.run(mode)
    if attempt.is_complete:
        if controller.last_export_location:
            print(f"Exported to {controller.last_export_location}", file=sys.stderr)
        controller.dismiss()
        return 0
    controller.cancel()
    return 1


def _cmd_bulk_delete(args: argparse.Namespace, backend: PixelBackendClient) -> int:
    service = BulkDeletionService(backend=backend, listing=PixelListing())
    try:
        deleted = service.delete(args.pixel_ids)
    except BulkDeletionError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(json.dumps({"scheduled": deleted}, indent=2))
    return 0


def _cmd_generate(args: argparse.Namespace, backend: PixelBackendClient) -> int:
    try:
        pixel = PixelProvisioner(backend=backend).generate(args.client_name, args.website)
    except ProvisioningError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(
        json.dumps(
            {
                "clientName": pixel.client_name,
                "website": pixel.website,
                "pixelSnippet": pixel.pixel_snippet,
                "sheetUrl": pixel.sheet_url,
            },
            indent=2,
        )
    )
    return 0


_COMMANDS = {
    "list": _cmd_list,
    "delete": _cmd_delete,
    "bulk-delete": _cmd_bulk_delete,
    "generate": _cmd_generate,
}


def main(argv: Sequence[str] | None = None, *, backend: PixelBackendClient | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()
    client = backend or PixelBackendClient(settings=get_backend_settings())
    return _COMMANDS[args.command](args, client)


if __name__ == "__main__":
    raise SystemExit(main())
