"""Command line entry point for the cube studio."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .common.exceptions import CubeStudioError, TransportError
from .config import StudioConfig, TransportConfig
from .core.session import EditorSession
from .export.firmware import VARIANTS
from .transport import create_link

logger = logging.getLogger(__name__)


def _load_config(path: Optional[str]) -> StudioConfig:
    if path is None:
        return StudioConfig.create_default()
    return StudioConfig.from_yaml(path)


def _load_session(args: argparse.Namespace) -> EditorSession:
    session = EditorSession(config=_load_config(args.config))
    with open(args.scene, "r", encoding="utf-8") as f:
        session.import_scene(f.read())
    logger.info(f"Loaded scene '{session.name}' with {len(session.sequence)} frames")
    return session


def cmd_firmware(args: argparse.Namespace) -> int:
    source = _load_session(args).firmware_source(args.variant)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(source)
        logger.info(f"Wrote {args.variant} firmware to {args.output}")
    else:
        sys.stdout.write(source)
    return 0


def cmd_payload(args: argparse.Namespace) -> int:
    session = _load_session(args)
    indices = [args.frame] if args.frame is not None else range(len(session.sequence))
    for index in indices:
        sys.stdout.write(session.payload(index))
    return 0


async def _send(session: EditorSession, args: argparse.Namespace) -> None:
    config = session.config.transport
    link_config = TransportConfig(
        host=args.host or config.host,
        port=args.port or config.port,
        connect_timeout_s=config.connect_timeout_s,
        path=config.path,
    )
    link = create_link(args.link, link_config)
    await link.connect()
    try:
        indices = [args.frame] if args.frame is not None else range(len(session.sequence))
        for index in indices:
            line = await session.send_frame(link, index)
            logger.info(f"Sent {line}")
    finally:
        await link.close()


def cmd_send(args: argparse.Namespace) -> int:
    session = _load_session(args)
    try:
        asyncio.run(_send(session, args))
    except TransportError as e:
        logger.error(f"Send failed: {e}")
        return 2
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .api import init_app

    config = _load_config(args.config)
    link = create_link(args.link, config.transport) if args.link else None
    uvicorn.run(init_app(config=config, link=link), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LED cube frame studio")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )
    parser.add_argument("--config", help="YAML configuration file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    firmware = subparsers.add_parser("firmware", help="Emit firmware source for a scene")
    firmware.add_argument("scene", help="Scene JSON file")
    firmware.add_argument("--variant", choices=VARIANTS, default="multiplexed")
    firmware.add_argument("-o", "--output", help="Write source to this file")
    firmware.set_defaults(func=cmd_firmware)

    payload = subparsers.add_parser("payload", help="Print transport lines for a scene")
    payload.add_argument("scene", help="Scene JSON file")
    payload.add_argument("--frame", type=int, help="Only this frame index")
    payload.set_defaults(func=cmd_payload)

    send = subparsers.add_parser("send", help="Send scene frames to a cube link")
    send.add_argument("scene", help="Scene JSON file")
    send.add_argument("--host", help="Link host")
    send.add_argument("--port", type=int, help="Link port")
    send.add_argument("--frame", type=int, help="Only this frame index")
    send.add_argument("--link", choices=["websocket", "mock"], default="websocket")
    send.set_defaults(func=cmd_send)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind host")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")
    serve.add_argument(
        "--link", choices=["websocket", "mock"], help="Attach a cube link for sending"
    )
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with argument parsing"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return args.func(args)
    except (OSError, CubeStudioError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
