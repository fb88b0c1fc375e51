"""Inspiration board core: persistent collections and background-music playback."""
