import io
import wave

import pytest
from fastapi.testclient import TestClient

from morse_studio.config import StudioConfig
from morse_studio.service import create_app
from morse_studio.synth import WavEncoder, export_pcm, synthesize, to_pcm16


@pytest.fixture
def client():
    config = StudioConfig()
    config.translator.sample_rate = 8000
    return TestClient(create_app(config))


def wav_bytes(morse, sample_rate=8000):
    return export_pcm(to_pcm16(synthesize(morse, wpm=20, sample_rate=sample_rate)), WavEncoder(sample_rate))


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_encode(client):
    body = client.post("/encode", json={"text": "sos"}).json()
    assert body["morse"] == "... --- ..."
    assert body["issues"] == []

    body = client.post("/encode", json={"text": "HI!"}).json()
    assert body["morse"] == ""
    assert body["unsupported"] == ["!"]
    assert body["issues"][0]["message"] == 'UNSUPPORTED: "!"'


def test_decode(client):
    body = client.post("/decode", json={"morse": ".... .. / ........"}).json()
    assert body["text"] == "HI ?"
    assert body["unknown_codes"] == ["........"]

    body = client.post("/decode", json={"morse": "..a"}).json()
    assert body["text"] == ""
    assert body["invalid_chars"] == ["a"]


def test_export_wav(client):
    response = client.post("/export", json={"morse": "... --- ...", "wpm": 20})
    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/wav"
    assert 'morse-code.wav' in response.headers["content-disposition"]
    assert response.content[:4] == b'RIFF'

    with wave.open(io.BytesIO(response.content), 'rb') as wf:
        assert wf.getframerate() == 8000
        assert wf.getnframes() > 0


@pytest.mark.parametrize("payload", [
    {"morse": "   "},
    {"morse": "..x"},
    {"morse": "...", "format": "ogg"},
    {"morse": "...", "wpm": 100},
    {"morse": "...", "wpm": 0},
])
def test_export_rejects_bad_requests(client, payload):
    assert client.post("/export", json=payload).status_code == 422


def test_analyze_upload_round_trip(client):
    files = {"audio": ("cq.wav", wav_bytes("-.-. --.-"), "audio/wav")}
    response = client.post("/analyze", files=files, data={"wpm": "20", "frequency": "700"})
    assert response.status_code == 200

    body = response.json()
    assert body["morse"] == "-.-. --.-"
    assert body["text"] == "CQ"
    assert body["issues"] == []
    assert len(body["magnitudes"]) == len(body["on"])
    assert body["threshold"] == pytest.approx(max(body["magnitudes"]) * 0.5)


def test_analyze_silence_reports_no_signal(client):
    silent = export_pcm(to_pcm16(synthesize("", wpm=20, sample_rate=8000)), WavEncoder(8000))
    body = client.post("/analyze", files={"audio": ("quiet.wav", silent, "audio/wav")}).json()
    assert body["text"] == ""
    assert body["issues"][0]["kind"] == "degenerate_audio"


def test_analyze_rejects_undecodable_upload(client):
    files = {"audio": ("junk.wav", b"definitely not audio", "audio/wav")}
    assert client.post("/analyze", files=files).status_code == 400


@pytest.mark.parametrize("morse", ["... // ...", "... /---"])
def test_export_accepts_unspaced_separators(client, morse):
    response = client.post("/export", json={"morse": morse})
    assert response.status_code == 200
    assert response.content[:4] == b'RIFF'
