"""
SubWave - Live Captions in the Terminal

Captures audio from the microphone or system audio (WASAPI loopback),
transcribes it with a local Whisper or Vosk model, and prints captions as
they arrive.

Usage:
  subwave                               # Default microphone, default backend
  subwave --system-audio                # Capture system audio
  subwave --backend vosk --policy append
  subwave --list-devices                # Show available devices
"""

import argparse
import logging
import signal
import sys
import threading
from dataclasses import replace

from subwave import __version__
from subwave.audio.devices import list_devices
from subwave.client.transcript import TranscriptView
from subwave.config.backends import BACKENDS, get_display_info, list_backends
from subwave.config.settings import CaptionSettings
from subwave.core.errors import SessionStartError
from subwave.core.models import CaptureMode, DisplayPolicy
from subwave.pipeline.session import SessionController
from subwave.utils.logging import quiet_backend_logs, setup_logging

logger = logging.getLogger(__name__)

# How often the main loop wakes to check for shutdown and stream health
POLL_INTERVAL = 0.1


def build_parser() -> argparse.ArgumentParser:
    backends = "\n".join(f"  {name:<10}{desc}" for name, desc in list_backends().items())
    parser = argparse.ArgumentParser(
        prog="subwave",
        description=f"SubWave Live Captions v{__version__}",
        epilog=f"backends:\n{backends}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--backend",
        choices=sorted(BACKENDS),
        help="ASR backend (default: SUBWAVE_BACKEND or whisper)",
    )
    parser.add_argument("--model-path", help="Model directory (default: backend's configured path)")
    parser.add_argument(
        "--system-audio", action="store_true", help="Capture system audio instead of microphone"
    )
    parser.add_argument(
        "--keyword",
        action="append",
        dest="keywords",
        metavar="KEYWORD",
        help="Preferred loopback device name keyword (repeatable)",
    )
    parser.add_argument("--threshold", type=float, help="Noise gate amplitude threshold")
    parser.add_argument("--interval", type=float, help="Transcription interval in milliseconds")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in DisplayPolicy],
        help="Show only the latest caption (replace) or accumulate them (append)",
    )
    parser.add_argument("--list-devices", action="store_true", help="List available audio devices")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> CaptionSettings:
    """Environment settings with command-line overrides applied."""
    settings = CaptionSettings.from_env()
    overrides = {}
    if args.backend:
        overrides["backend"] = args.backend
    if args.model_path:
        overrides["model_path"] = args.model_path
    if args.system_audio:
        overrides["capture_mode"] = CaptureMode.LOOPBACK
    if args.keywords:
        overrides["loopback_keywords"] = tuple(k.lower() for k in args.keywords)
    if args.threshold is not None:
        overrides["noise_threshold"] = args.threshold
    if args.interval is not None:
        overrides["interval"] = args.interval / 1000
    if args.policy:
        overrides["display_policy"] = DisplayPolicy(args.policy)
    return replace(settings, **overrides)


def print_banner(settings: CaptionSettings):
    # ASCII only for Windows console compatibility
    print("+======================================+")
    print(f"|        SubWave Live Captions v{__version__}  |")
    print("+======================================+")
    print(f"Model: {get_display_info(settings.backend)}")
    print(f"Path: {settings.resolved_model_path}")
    if settings.capture_mode == CaptureMode.LOOPBACK:
        print("Audio: [Speaker] System Audio (WASAPI loopback)")
    else:
        print("Audio: [Mic] Microphone")
    print(f"Display: {settings.display_policy.value}")
    print()
    print("Press Ctrl+C to stop")
    print()


def run(controller: SessionController, view: TranscriptView, stop_event: threading.Event) -> int:
    """Pump updates into the view until stopped or the capture stream fails."""
    channel = controller.updates
    while not stop_event.is_set():
        update = channel.recv(timeout=POLL_INTERVAL)
        if update is not None:
            view.apply(update)
        elif controller.fault is not None or not controller.check_health():
            print(f"\nAudio capture failed: {controller.fault}", file=sys.stderr)
            return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_devices:
        list_devices(args.keywords)
        return 0

    setup_logging(level="DEBUG" if args.debug else None)
    quiet_backend_logs(logging.INFO if args.debug else logging.WARNING)

    try:
        settings = settings_from_args(args)
    except (KeyError, ValueError) as e:
        parser.error(str(e))

    print_banner(settings)

    view = TranscriptView(policy=settings.display_policy)
    view.on_change = lambda: print(f"> {view.get_text()}", flush=True)
    controller = SessionController(settings)

    try:
        controller.start()
    except SessionStartError as e:
        print(f"Failed to start captions: {e}", file=sys.stderr)
        return 1

    stop_event = threading.Event()

    def _signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down gracefully...")
        stop_event.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)
    if sys.platform == "win32":
        signal.signal(signal.SIGBREAK, _signal_handler)

    try:
        return run(controller, view, stop_event)
    except KeyboardInterrupt:
        return 0
    finally:
        controller.stop()


if __name__ == "__main__":
    sys.exit(main())
