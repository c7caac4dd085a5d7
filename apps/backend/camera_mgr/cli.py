from __future__ import annotations

import argparse
import signal
import sys

import uvicorn

from camera_mgr.config.defaults import APP_VERSION, DEFAULT_LOG_LEVEL
from camera_mgr.main import create_app

_KNOWN_COMMANDS = {"serve"}


def _add_serve_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        action="append",
        default=[],
        help="TOML file with ClusterVMS config (may be given more than once; later files win)",
    )
    parser.add_argument("--bind", default=None, help="Bind host (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")
    parser.add_argument("--base-url", default=None, help="Public base URL used for recast stream URLs")
    parser.add_argument("--registry-path", default=None, help="JSON file holding the camera registry")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, help="Log level for the app and uvicorn")


def _build_parser(prog: str) -> argparse.ArgumentParser:
    """Parser for the bare invocation, which serves."""
    parser = argparse.ArgumentParser(prog=prog, description="Camera manager for ClusterVMS")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    _add_serve_arguments(parser)
    return parser


def _build_command_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Camera manager for ClusterVMS")
    subparsers = parser.add_subparsers(dest="command", required=True)
    serve = subparsers.add_parser("serve", help="Run the camera manager REST API")
    _add_serve_arguments(serve)
    return parser


def _run(parsed: argparse.Namespace) -> int:
    if not parsed.config:
        print("[warning] No config files specified; using defaults")

    app = create_app(
        config_paths=parsed.config,
        bind=parsed.bind,
        port=parsed.port,
        base_url=parsed.base_url,
        registry_path=parsed.registry_path,
        log_level=parsed.log_level,
    )
    settings = app.state.camera_mgr.settings

    print(f"Camera manager listening on http://{settings.bind}:{settings.port}")
    config = uvicorn.Config(
        app,
        host=settings.bind,
        port=settings.port,
        log_level=parsed.log_level,
        workers=1,
        timeout_graceful_shutdown=2,
    )
    server = uvicorn.Server(config)
    previous_handlers: dict[int, object] = {}
    run_exit_code: int | None = None

    def _finalize_state_shutdown() -> None:
        app_state = getattr(app, "state", None)
        mgr_state = getattr(app_state, "camera_mgr", None)
        if mgr_state is None:
            return
        mgr_state.shutdown()

    def _request_exit(signum: int, _frame: object) -> None:
        if signum in {signal.SIGINT, signal.SIGTERM}:
            server.should_exit = True

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            previous_handlers[sig] = signal.getsignal(sig)
            signal.signal(sig, _request_exit)
        except (AttributeError, ValueError):
            continue

    try:
        try:
            server.run()
        except KeyboardInterrupt:
            server.should_exit = True
        except SystemExit as exc:
            if server.should_exit:
                run_exit_code = 0
            else:
                code = exc.code
                run_exit_code = code if isinstance(code, int) else 1
    finally:
        _finalize_state_shutdown()
        for sig, handler in previous_handlers.items():
            try:
                signal.signal(sig, handler)
            except (AttributeError, ValueError):
                continue
    if run_exit_code is not None:
        return run_exit_code
    if bool(getattr(server, "started", False)) or server.should_exit:
        return 0
    return 1


def main(argv: list[str] | None = None) -> int:
    args = list(argv or [])
    try:
        if args and args[0] in _KNOWN_COMMANDS:
            parsed = _build_command_parser("camera-mgr").parse_args(args)
        else:
            parsed = _build_parser("camera-mgr").parse_args(args)
        return _run(parsed)
    except KeyboardInterrupt:
        return 0
    except Exception as exc:
        print(f"[error] {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
