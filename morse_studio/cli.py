#!/usr/bin/env python3
"""
Morse Studio command line.

Usage:
    morse-studio encode "CQ DE W1AW"
    morse-studio decode "-.-. --.- / -.. ."
    morse-studio export "SOS" --output sos.mp3 --wpm 18
    morse-studio play "... --- ..." --wpm 25
    morse-studio analyze recording.wav --wpm 20 --frequency 700 --plot chart.png
    morse-studio serve --port 8000
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich import box
from rich.panel import Panel
from rich.table import Table

from .analysis.audio_loader import AnalysisContext, AudioLoader
from .analysis.visualization import build_bar_chart, render_bar_chart
from .codec.text_codec import find_invalid_morse_chars, morse_to_text, text_to_morse
from .config import DecoderConfig, StudioConfig, load_config
from .errors import MorseStudioError
from .pipeline.morse_decoder import MorseAudioDecoder
from .synth.export import create_encoder, export_pcm
from .synth.tone_synthesizer import synthesize, to_pcm16
from .utils import console, setup_logging

logger = logging.getLogger(__name__)


def _resolve_morse(args) -> str:
    """Morse from --text or the positional argument."""
    if args.text:
        result = text_to_morse(args.input)
        if not result.ok:
            raise MorseStudioError(result.issues[0].message)
        return result.morse
    return args.input.strip()


def _check_wpm(wpm: float, config: StudioConfig):
    limits = config.limits
    if not limits.wpm_min <= wpm <= limits.wpm_max:
        raise MorseStudioError(f"wpm must be between {limits.wpm_min} and {limits.wpm_max}")


def cmd_encode(args, config: StudioConfig) -> int:
    text = args.input
    if len(text) > config.limits.max_text_length:
        console.print(f"[yellow]Text is {len(text)} characters "
                      f"(guideline {config.limits.max_text_length})[/yellow]")

    result = text_to_morse(text)
    if not result.ok:
        for issue in result.issues:
            console.print(f"[red]{issue.message}[/red]")
        return 1

    console.print(result.morse, highlight=False)
    return 0


def cmd_decode(args, config: StudioConfig) -> int:
    result = morse_to_text(args.input)
    for issue in result.issues:
        console.print(f"[yellow]{issue.message}[/yellow]")
    if result.invalid_chars:
        return 1

    console.print(result.text, highlight=False)
    return 0


def cmd_export(args, config: StudioConfig) -> int:
    morse = _resolve_morse(args)
    invalid = find_invalid_morse_chars(morse)
    if not morse or invalid:
        console.print(f"[red]Nothing valid to export: {morse!r}[/red]")
        return 1

    tcfg = config.translator
    wpm = args.wpm or tcfg.wpm
    _check_wpm(wpm, config)

    output = Path(args.output)
    fmt = args.format or output.suffix.lstrip('.') or 'wav'
    extra = {'bitrate_kbps': tcfg.mp3_bitrate} if fmt.lower() == 'mp3' else {}
    encoder = create_encoder(fmt, sample_rate=tcfg.sample_rate, **extra)

    with console.status("[bold blue]Rendering audio...", spinner="dots"):
        buffer = synthesize(morse, wpm, tcfg.sample_rate, args.frequency or tcfg.tone_frequency,
                            tcfg.gain, tcfg.ramp)
        data = export_pcm(to_pcm16(buffer), encoder, tcfg.export_block_size)

    output.write_bytes(data)
    console.print(f"[green]Wrote {output} ({buffer.duration:.2f}s, {len(data):,} bytes)[/green]")
    return 0


def cmd_play(args, config: StudioConfig) -> int:
    from .playback.session import PlaybackController
    from .playback.sounddevice_sink import SounddeviceSink

    morse = _resolve_morse(args)
    wpm = args.wpm or config.translator.wpm
    _check_wpm(wpm, config)

    controller = PlaybackController(SounddeviceSink(config.translator.sample_rate), config.translator)
    console.print(f"Playing [bold]{morse}[/bold] at {wpm} WPM (Ctrl+C to stop)", highlight=False)
    try:
        session = controller.play(morse, wpm=wpm)
        while session.wait(0.2) is None:
            pass
    except KeyboardInterrupt:
        controller.stop()
    finally:
        controller.close()
    return 0


def _result_panel(path: Path, result) -> Panel:
    info = Table(show_header=False, box=None, padding=(0, 2))
    info.add_row("File", path.name)
    info.add_row("Windows", f"{len(result.magnitudes)} x {result.magnitudes.window_ms:g} ms")
    info.add_row("Threshold", f"{result.threshold:.5f} ({result.threshold_fraction:.0%} of peak)")
    info.add_row("Runs", str(len(result.runs)))
    info.add_row("Morse", result.morse or "[dim]-[/dim]")
    info.add_row("Text", result.text or "[dim]-[/dim]")
    return Panel(info, title="[bold]Decode[/bold]", box=box.ROUNDED)


def cmd_analyze(args, config: StudioConfig) -> int:
    dcfg = config.decoder
    wpm = args.wpm or dcfg.wpm
    _check_wpm(wpm, config)

    decoder_config = DecoderConfig(
        wpm=wpm,
        target_frequency=args.frequency or dcfg.target_frequency,
        threshold=args.threshold if args.threshold is not None else dcfg.threshold,
        window_ms=dcfg.window_ms
    )

    path = Path(args.input)
    context = AnalysisContext()
    with console.status("[bold blue]Loading audio...", spinner="dots"):
        asyncio.run(AudioLoader(context).load(path))

    result = MorseAudioDecoder(decoder_config).analyze(context)
    console.print(_result_panel(path, result))
    for issue in result.issues:
        console.print(f"[yellow]{issue.message}[/yellow]")

    if args.plot:
        chart = build_bar_chart(result.magnitudes, decoder_config.threshold)
        render_bar_chart(chart, args.plot, title=f"{path.name} @ {decoder_config.target_frequency:g} Hz")
        console.print(f"[dim]Chart saved to {args.plot}[/dim]")
    return 0


def cmd_serve(args, config: StudioConfig) -> int:
    from .service.api_server import serve
    serve(config, args.host, args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='morse-studio', description='Morse code translator, synthesizer and decoder')
    parser.add_argument('--config', '-c', type=str, default=None, help='Path to YAML config')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('encode', help='Text to Morse')
    p.add_argument('input', help='Text to encode')
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser('decode', help='Morse to text')
    p.add_argument('input', help='Morse string')
    p.set_defaults(func=cmd_decode)

    for name, func, help_text in (('export', cmd_export, 'Write Morse audio to a file'),
                                  ('play', cmd_play, 'Play Morse through the sound card')):
        p = sub.add_parser(name, help=help_text)
        p.add_argument('input', help='Morse string (or text with --text)')
        p.add_argument('--text', action='store_true', help='Treat input as plain text')
        p.add_argument('--wpm', type=float, help='Words per minute')
        p.set_defaults(func=func)
        if name == 'export':
            p.add_argument('--output', '-o', type=str, default='morse-code.wav', help='Output file')
            p.add_argument('--format', '-f', type=str, choices=['wav', 'mp3'],
                           help='Output format (default: from extension)')
            p.add_argument('--frequency', type=float, help='Tone frequency in Hz')

    p = sub.add_parser('analyze', help='Decode Morse from an audio file')
    p.add_argument('input', help='Audio file (WAV, or anything ffmpeg reads)')
    p.add_argument('--wpm', type=float, help='Expected speed')
    p.add_argument('--frequency', type=float, help='Tone frequency in Hz')
    p.add_argument('--threshold', type=float, help='Fraction of peak magnitude (0-1)')
    p.add_argument('--plot', type=str, help='Save magnitude chart to this image file')
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser('serve', help='Run the HTTP API')
    p.add_argument('--host', type=str, default='127.0.0.1')
    p.add_argument('--port', type=int, default=8000)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else StudioConfig()
    except MorseStudioError as e:
        console.print(f"[red]{e}[/red]")
        return 2

    setup_logging(config.logging.level)

    try:
        return args.func(args, config)
    except (MorseStudioError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == '__main__':
    sys.exit(main())
