"""Meeting recorder parts: PulseAudio capture, speech gating and chunking, and transcription, chat and DevTools clients."""

__version__ = "0.1.0"