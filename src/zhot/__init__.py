"""zhot: region screenshots for Wayland and X11.

A thin front-end over the desktop's own tools:
- grim/slurp on Wayland, maim on X11
- wl-copy, xclip or xsel for the clipboard
- zenity for the save dialog, notify-send for notifications
"""

__version__ = "1.0.0"
