"""Article processing services: front matter, themes, rendering and image relocation."""
