#!/usr/bin/env python3
"""
REST API for Morse translation, audio export and audio decoding.

Usage:
    morse-studio serve --port 8000
    python -m morse_studio.service.api_server --config config.yaml

Then:
    POST /encode   {"text": "SOS"}
    POST /decode   {"morse": "... --- ..."}
    POST /export   {"morse": "... --- ...", "wpm": 20, "format": "mp3"}
    POST /analyze  multipart audio file + wpm / frequency / threshold
"""

import argparse
import logging
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field
import uvicorn

from ..analysis.audio_loader import load_audio
from ..analysis.visualization import build_bar_chart
from ..codec.text_codec import find_invalid_morse_chars, morse_to_text, text_to_morse
from ..config import DecoderConfig, StudioConfig, load_config
from ..errors import AudioLoadError, InvalidMorseSyntaxError
from ..pipeline.morse_decoder import MorseAudioDecoder
from ..synth.export import create_encoder, export_pcm
from ..synth.tone_synthesizer import synthesize, to_pcm16
from ..utils import setup_logging

logger = logging.getLogger(__name__)


class EncodeRequest(BaseModel):
    text: str


class DecodeRequest(BaseModel):
    morse: str


class ExportRequest(BaseModel):
    morse: str
    wpm: Optional[float] = Field(default=None, gt=0)
    format: str = 'wav'


def _issues(issues) -> List[dict]:
    return [issue.to_dict() for issue in issues]


def create_app(config: Optional[StudioConfig] = None) -> FastAPI:
    """Build the API around a configuration."""
    config = config or StudioConfig()
    limits = config.limits

    app = FastAPI(
        title="Morse Studio API",
        description="Translate, synthesize and decode Morse code",
        version="1.0.0"
    )

    # Allow CORS for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def check_wpm(wpm: float):
        if not limits.wpm_min <= wpm <= limits.wpm_max:
            raise HTTPException(
                status_code=422,
                detail=f"wpm must be between {limits.wpm_min} and {limits.wpm_max}"
            )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.post("/encode")
    async def encode(request: EncodeRequest):
        result = text_to_morse(request.text)
        return {
            "morse": result.morse,
            "unsupported": result.unsupported,
            "issues": _issues(result.issues),
        }

    @app.post("/decode")
    async def decode(request: DecodeRequest):
        result = morse_to_text(request.morse)
        return {
            "text": result.text,
            "unknown_codes": result.unknown_codes,
            "invalid_chars": result.invalid_chars,
            "issues": _issues(result.issues),
        }

    @app.post("/export")
    async def export(request: ExportRequest):
        """Render Morse to a downloadable WAV or MP3 file."""
        morse = request.morse.strip()
        if not morse:
            raise HTTPException(status_code=422, detail="Nothing to export")

        invalid = find_invalid_morse_chars(morse)
        if invalid:
            raise HTTPException(status_code=422, detail=str(InvalidMorseSyntaxError(invalid)))

        wpm = request.wpm if request.wpm is not None else config.translator.wpm
        check_wpm(wpm)

        tcfg = config.translator
        try:
            encoder = create_encoder(
                request.format,
                sample_rate=tcfg.sample_rate,
                **({'bitrate_kbps': tcfg.mp3_bitrate} if request.format.lower() == 'mp3' else {})
            )
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

        buffer = synthesize(morse, wpm, tcfg.sample_rate, tcfg.tone_frequency, tcfg.gain, tcfg.ramp)
        data = export_pcm(to_pcm16(buffer), encoder, tcfg.export_block_size)

        return Response(
            content=data,
            media_type=encoder.media_type,
            headers={"Content-Disposition": f'attachment; filename="morse-code.{encoder.format_name}"'}
        )

    @app.post("/analyze")
    async def analyze(
        audio: UploadFile = File(...),
        wpm: float = Form(config.decoder.wpm),
        frequency: float = Form(config.decoder.target_frequency),
        threshold: float = Form(config.decoder.threshold),
        window_ms: float = Form(config.decoder.window_ms),
    ):
        """
        Decode an uploaded audio file.

        Returns:
            morse, text, issues and the magnitude series with its threshold
        """
        check_wpm(wpm)
        if not 0 <= threshold <= 1:
            raise HTTPException(status_code=422, detail="threshold must be between 0 and 1")
        if window_ms <= 0:
            raise HTTPException(status_code=422, detail="window_ms must be positive")

        # Save uploaded file temporarily, keeping its extension for the loader
        suffix = Path(audio.filename or '').suffix or '.wav'
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
            tmp.write(await audio.read())
            tmp_path = tmp.name

        try:
            buffer = load_audio(tmp_path)
        except AudioLoadError as e:
            raise HTTPException(status_code=400, detail=f"Could not decode audio: {e}")
        finally:
            Path(tmp_path).unlink(missing_ok=True)

        decoder = MorseAudioDecoder(DecoderConfig(
            wpm=wpm, target_frequency=frequency, threshold=threshold, window_ms=window_ms
        ))
        result = decoder.decode(buffer)
        chart = build_bar_chart(result.magnitudes, threshold)

        return {
            "morse": result.morse,
            "text": result.text,
            "issues": _issues(result.issues),
            "magnitudes": [float(v) for v in result.magnitudes.values],
            "threshold": result.threshold,
            "threshold_fraction": threshold,
            "window_ms": window_ms,
            "on": [bool(v) for v in chart.is_on],
        }

    return app


def main():
    parser = argparse.ArgumentParser(description='Morse Studio API Server')
    parser.add_argument('--config', '-c', type=str, default=None,
                        help='Path to YAML config')
    parser.add_argument('--host', type=str, default='127.0.0.1',
                        help='Host to bind to')
    parser.add_argument('--port', type=int, default=8000,
                        help='Port to bind to')
    args = parser.parse_args()

    config = load_config(args.config) if args.config else StudioConfig()
    serve(config, args.host, args.port)


def serve(config: StudioConfig, host: str = '127.0.0.1', port: int = 8000):
    setup_logging(config.logging.level)
    logger.info("Starting server at http://%s:%d", host, port)
    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == '__main__':
    main()
