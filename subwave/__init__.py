"""
SubWave - real-time captioning from a microphone or system audio.

Capture -> noise gate -> shared buffer -> periodic transcription -> updates.
"""

__version__ = "1.0.0"
