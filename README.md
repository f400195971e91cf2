# recorder

Building blocks for an ambient meeting recorder on Linux. The package captures
system audio and microphone audio side by side from PulseAudio, decides which
stretches hold speech, cuts them into chunks, and talks to local
OpenAI-compatible servers for transcription and chat completion. It can also
query Google Meet and Microsoft Teams tabs through the Chrome DevTools
Protocol to see who is speaking.

## What is inside

| Module | Purpose |
| --- | --- |
| `recorder.pcm` | `compute_rms`, `frame_count` and `trim_trailing_frames` for 16 kHz s16le mono PCM (`SAMPLE_RATE`, `FRAME_BYTES`) |
| `recorder.frame` | `read_frame` reads one whole frame (raising `EOFError` on a short stream); `silent`; `DualFrame` pairs system and mic audio |
| `recorder.wav` | `make_wav` wraps raw mono 16-bit PCM in a 44-byte WAV header |
| `recorder.gate` | `GateConfig` with `frame_has_speech` and `chunk_passes`, returning a `GateResult`; `default_gate()` |
| `recorder.chunk` | `Accumulator`, which buffers frames and returns a `ChunkOutput` whose `action` is `Action.NONE`, `EMIT` or `DISCARD`; `ChunkConfig`, `default_config()` |
| `recorder.parec` | `ParecClient` for `pactl`/`parec`, with a pluggable `CommandRunner` (`ExecRunner` by default) and `CaptureStream` |
| `recorder.capture` | `ParecSource`, a `CaptureSource` yielding `DualFrame`s from two `parec` processes |
| `recorder.whisper` | `WhisperClient` uploads WAV data and returns whitespace-normalised text; raises `TranscriptionError` on non-200 |
| `recorder.llm` | `LLMClient.complete` sends `Message`s and returns the first choice's text; raises `CompletionError` on non-200 |
| `recorder.cdp` | `CdpClient.list_tabs` and `CdpClient.evaluate` over a minimal WebSocket (`ws_dial`, `ws_write`, `ws_read`); raises `CdpError` |
| `recorder.conference` | `Provider` interface, `Participant`, `ParticipantSnapshot`, JSON parsing and CSS class validation |
| `recorder.meet`, `recorder.teams` | `MeetProvider` and `TeamsProvider`, which build the JavaScript to evaluate and parse its results |
| `recorder.config` | `load()` for configuration with XDG directories and defaults |
| `recorder.prompts`, `recorder.prompt_vars` | Built-in system prompt templates, file overrides, and the variables they are rendered with |
| `recorder.prompt_cmd` | `run` prints the resolved prompts |
| `recorder.lock` | `RecorderLock`, a heartbeat lockfile for a single running instance |
| `recorder.httpclient` | `new_http_client` and `close_http_client` for a shared `httpx.Client` |

## Requirements

Python 3.10 or later, and `httpx`. Audio capture needs PulseAudio (or
PipeWire's PulseAudio layer) with `pactl` and `parec` on the `PATH`.

## Configuration

`recorder.config.load()` reads `$XDG_CONFIG_HOME/recorder/config.json`
(by default `~/.config/recorder/config.json`). A missing file is fine: every
setting has a default. Malformed content raises `ValueError`. Output
directories, the log file and prompt paths beginning with `~/` are expanded to
the home directory.

```json
{
  "whisper": {"url": "http://localhost:8178/v1/audio/transcriptions", "timeoutS": 60},
  "llm": {"url": "http://localhost:8179/v1/chat/completions", "model": "default", "timeoutS": 180},
  "transcript": {"outputDir": "~/.local/share/recorder/transcripts"},
  "segments": {"outputDir": "~/.local/share/recorder/segments"},
  "dedup": {"threshold": 0.6},
  "signals": {"silenceThresholdS": 180, "cdpPorts": [9222]},
  "speaker": {"ambiguityRatio": 0.05},
  "log": {"file": ""},
  "prompts": {"cleanup": "~/.config/recorder/prompts/cleanup.md"},
  "promptVars": {
    "languages": ["Swedish", "English"],
    "owner": {"role": "software engineer", "summaryFor": "a human inbox"},
    "titleMaxWords": 8
  }
}
```

Prompt paths are optional. When one is set and the file does not exist yet,
the built-in template is written there so it can be edited; the template is
then rendered with the `promptVars` values. Empty or missing `promptVars`
fields keep their defaults.

## Examples

Load the configuration and print the resolved prompts:

```python
import sys

from recorder.config import load
from recorder.prompt_cmd import run

cfg = load()
run(cfg, ["summarize"], sys.stdout)
```

Capture audio and cut it into speech chunks:

```python
from datetime import datetime

from recorder.capture import ParecSource
from recorder.chunk import Accumulator, Action, default_config
from recorder.gate import default_gate
from recorder.parec import ParecClient
from recorder.pcm import SAMPLE_RATE
from recorder.wav import make_wav

source = ParecSource(ParecClient())
gate = default_gate()
accumulator = Accumulator(default_config())

for frame in source.start():
    speech = gate.frame_has_speech(frame.sys, frame.mic)
    out = accumulator.ingest(frame.sys, frame.mic, datetime.now(), speech.passes)
    if out.action is Action.EMIT:
        wav_bytes = make_wav(out.sys_pcm, SAMPLE_RATE)
        ...
```

Transcribe a chunk:

```python
from recorder.httpclient import close_http_client, new_http_client
from recorder.whisper import WhisperClient, WhisperClientConfig

http = new_http_client()
try:
    client = WhisperClient(http, WhisperClientConfig(url="http://localhost:8178/v1/audio/transcriptions"))
    text = client.transcribe(wav_bytes, "sys.wav")
finally:
    close_http_client(http)
```

Keep one recorder running at a time (`RecorderLock` is also a context
manager):

```python
from recorder.lock import LockHeldError, RecorderLock

lock = RecorderLock("/tmp")
try:
    lock.acquire()
except LockHeldError as err:
    print(err)
else:
    try:
        ...  # call lock.heartbeat() periodically
    finally:
        lock.release()
```

## What this package does not do

It is a library of parts, not a finished recorder. There is no command-line
program and no long-running daemon tying capture, chunking, transcription and
summarization together. It does not write transcripts or segment files, does
not deduplicate audio, and does not attribute speech to speakers: the
`transcript`, `segments`, `dedup`, `signals`, `speaker` and `log` settings are
loaded into `Config` but nothing in the package acts on them. The conference
providers build and parse the DevTools expressions; discovering which CSS
class marks a speaker is left to the caller.

## Running the tests

Install the `test` extra and run `pytest` from the project root.