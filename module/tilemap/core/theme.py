"""Light theme for the page shell and the tile map.

Roboto on white, translucent black text, thin grey borders. Read by the
figure shell, which styles every tile map class from it. All styling
is inline CSS.
"""

THEME = {
    "background": "#ffffff",            # page background
    "surface": "#ffffff",               # chart boxes
    "foreground": "rgba(0, 0, 0, 0.8)",  # body text, captions, tile labels
    "heading": "#000000",               # title and legend text
    "border": "#cccccc",                # tooltip and menu borders
    "muted": "#7c7067",                 # secondary text, menu separators
    "accent": "#0077b8",                # menu hover
    "font_family": "Roboto, system-ui, -apple-system, \"Segoe UI\", sans-serif",
}
