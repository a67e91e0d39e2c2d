"""Scratch sampler core: settings, mappings, playlists, tracks, rig loop and filters."""

__version__ = "0.1.0"