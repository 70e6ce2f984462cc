"""Iterator-based PCM sample sources: conversion, mixing, queueing and WAV decoding."""

__version__ = "0.1.0"

__all__ = [
    "buffer",
    "channels",
    "decoder",
    "dynamic_mixer",
    "errors",
    "sample",
    "sample_rate",
    "sources_queue",
    "wav",
]