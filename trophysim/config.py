"""Persistent settings of the simulator, stored as a JSON file."""

from __future__ import annotations

import json
import os
import re
import sys
from collections.abc import Iterator, Sequence
from dataclasses import fields
from pathlib import Path
from typing import Any

from trophysim.geometry import Coord, Rect, RelativeRect, Size
from trophysim.shader_state import Parameters, ShaderOptions, ShaderState

DEFAULT_FILENAME = "smiuluator.config"
DEFAULT_UDP_PORT = 3413

_SNAKE_PART = re.compile(r"_([a-z])")


def ensure_file(path: str) -> None:
    """Raise FileNotFoundError unless ``path`` exists."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {os.path.abspath(path)}")


def first_if_exists(custom_path: str, default_path: str) -> str:
    return custom_path if os.path.exists(custom_path) else default_path


def _camel(name: str) -> str:
    return _SNAKE_PART.sub(lambda match: match.group(1).upper(), name)


def _coerce(value: Any, like: Any) -> Any:
    """Convert a JSON value to the type of ``like``, rejecting mismatches."""
    if isinstance(like, bool):
        if not isinstance(value, bool):
            raise TypeError(f"expected a boolean, got {value!r}")
        return value
    if isinstance(like, str):
        if not isinstance(value, str):
            raise TypeError(f"expected a string, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return int(value) if isinstance(like, int) else float(value)


def _value(obj: dict, key: str, default: Any) -> Any:
    return _coerce(obj[key], default) if key in obj else default


def _dump_fields(obj: Any) -> dict[str, Any]:
    return {_camel(f.name): getattr(obj, f.name) for f in fields(obj)}


def _load_fields(cls: type, data: dict) -> Any:
    template = cls()
    return cls(
        **{
            f.name: _coerce(data[_camel(f.name)], getattr(template, f.name))
            for f in fields(cls)
        }
    )


def _parse_options(args: Sequence[str], letters: str) -> Iterator[tuple[str, str]]:
    """Yield (letter, value) for short options that each take an argument."""
    tokens = iter(args)
    for token in tokens:
        if token == "--":
            return
        if not token.startswith("-") or token == "-":
            continue
        for position, letter in enumerate(token[1:], start=1):
            if letter not in letters:
                print(f"Invalid option: {letter}", file=sys.stderr)
                continue
            value = token[position + 1 :] or next(tokens, None)
            if value is None:
                print(f"Option requires an argument: {letter}", file=sys.stderr)
            else:
                yield letter, value
            break


class Config:
    """Window, view and shader settings, read from and stored to a file."""

    def __init__(self, path: str | os.PathLike = DEFAULT_FILENAME) -> None:
        self.path = Path(path)
        self.window_size = Size(1080, 720)
        self.udp_port = DEFAULT_UDP_PORT
        self.custom_vertex_shader_path = ""
        self.custom_fragment_shader_path = ""
        self.hot_reload_shaders = True
        self.shader_view = RelativeRect(width=0.5, height=0.9, x=0.05, y=0.05)
        self._current_json: Any = None
        self._window_pos: Coord | None = None
        self.try_read_file()

    @classmethod
    def from_argv(cls, argv: Sequence[str] | None = None) -> Config:
        """Build from options -c CONFIG, -f FRAGMENT and -v VERTEX."""
        args = sys.argv[1:] if argv is None else list(argv)
        chosen = {"c": DEFAULT_FILENAME, "f": "", "v": ""}
        for letter, value in _parse_options(args, "cfv"):
            if os.path.exists(value):
                chosen[letter] = value
            else:
                print(f"Ignore given path, as it is invalid: {value}", file=sys.stderr)

        config = cls(chosen["c"])
        if chosen["v"]:
            config.custom_vertex_shader_path = chosen["v"]
        if chosen["f"]:
            config.custom_fragment_shader_path = chosen["f"]
        return config

    def was_read(self) -> bool:
        return self._current_json is not None

    def _try_read_json(self) -> Any:
        try:
            with self.path.open(encoding="utf-8") as file:
                return json.load(file)
        except (FileNotFoundError, IsADirectoryError, PermissionError):
            return None

    def try_read_file(self) -> bool:
        """Read the file and apply window, view and shader settings."""
        try:
            loaded = self._try_read_json()
            if loaded is None:
                return False
            self._current_json = loaded
            if not isinstance(loaded, dict):
                raise TypeError("configuration is not a JSON object")

            window = loaded.get("window")
            if isinstance(window, dict):
                width = _value(window, "width", self.window_size.width)
                height = _value(window, "height", self.window_size.height)
                self.window_size = Size(width, height)
                self._window_pos = Coord(_value(window, "x", 0), _value(window, "y", 0))

            view = loaded.get("view")
            if isinstance(view, dict):
                sv = self.shader_view
                x = _value(view, "x", sv.x)
                y = _value(view, "y", sv.y)
                width = _value(view, "width", sv.width)
                height = _value(view, "height", sv.height)
                self.shader_view = RelativeRect(width=width, height=height, x=x, y=y)

            shaders = loaded.get("shaders")
            if isinstance(shaders, dict):
                self.custom_vertex_shader_path = _value(shaders, "vertex", "")
                self.custom_fragment_shader_path = _value(shaders, "fragment", "")
                self.hot_reload_shaders = _value(shaders, "reload", self.hot_reload_shaders)
            return True
        except (ValueError, TypeError, KeyError) as error:
            print(f"Error initializing Config: {error}", file=sys.stderr)
        return False

    def store(self, window_rect: Rect, state: ShaderState | None = None) -> None:
        """Write the settings, merged into whatever the file already holds."""
        document = self._try_read_json()
        if document is None:
            document = {}
        document["window"] = {
            "x": window_rect.x,
            "y": window_rect.y,
            "width": window_rect.width,
            "height": window_rect.height,
        }
        sv = self.shader_view
        document["view"] = {"x": sv.x, "y": sv.y, "width": sv.width, "height": sv.height}
        document["shaders"] = {
            "vertex": self.custom_vertex_shader_path,
            "fragment": self.custom_fragment_shader_path,
            "reload": self.hot_reload_shaders,
        }
        if state is not None:
            trophy = state.trophy
            document["params"] = _dump_fields(state.params)
            document["options"] = _dump_fields(state.options)
            document["trophy"] = {
                "logo": {
                    "x": trophy.logo_center.x,
                    "y": trophy.logo_center.y,
                    "z": trophy.logo_center.z,
                    "width": trophy.logo_size.x,
                    "height": trophy.logo_size.y,
                },
                "base": {
                    "x": trophy.base_center.x,
                    "y": trophy.base_center.y,
                    "z": trophy.base_center.z,
                    "size": trophy.base_size,
                },
            }
        try:
            self.path.write_text(json.dumps(document, indent=4, sort_keys=True), encoding="utf-8")
        except OSError as error:
            print(f"Error storing Config: {error}", file=sys.stderr)

    def restore_window(self, window_rect: Rect, monitor_minimum: Coord) -> Rect:
        """The window placement to apply, given the current one."""
        rect = Rect(
            x=window_rect.x, y=window_rect.y, width=window_rect.width, height=window_rect.height
        )
        if not self.was_read():
            return rect
        if self._window_pos is not None:
            self._window_pos.move_to_larger(monitor_minimum)
            rect.x, rect.y = self._window_pos.x, self._window_pos.y
        if self.window_size.width > 0:
            rect.width = self.window_size.width
        if self.window_size.height > 0:
            rect.height = self.window_size.height
        return rect

    def restore_state(self, state: ShaderState) -> bool:
        """Apply stored parameters, options and trophy geometry to ``state``."""
        if not self.was_read() and not self.try_read_file():
            print("Could not restore state, because could not read file.", file=sys.stderr)
            return False
        root = self._current_json
        if "params" in root:
            state.params = _load_fields(Parameters, root["params"])
        if "options" in root:
            state.options = _load_fields(ShaderOptions, root["options"])
        if "trophy" in root:
            trophy_json = root["trophy"]
            print(
                "Rebuilding Trophy from stored config: "
                + json.dumps(trophy_json, separators=(",", ":"), sort_keys=True)
            )
            trophy = state.trophy
            logo = trophy_json["logo"]
            trophy.logo_center.x = _coerce(logo["x"], 0.0)
            trophy.logo_center.y = _coerce(logo["y"], 0.0)
            trophy.logo_center.z = _coerce(logo["z"], 0.0)
            trophy.logo_size.x = _coerce(logo["width"], 0.0)
            trophy.logo_size.y = _coerce(logo["height"], 0.0)
            base = trophy_json["base"]
            trophy.base_center.x = _coerce(base["x"], 0.0)
            trophy.base_center.y = _coerce(base["y"], 0.0)
            trophy.base_center.z = _coerce(base["z"], 0.0)
            trophy.base_size = _coerce(base["size"], 0.0)
            trophy.rebuild()
        return True

    def shader_rect(self, resolution: Size) -> Rect:
        """The pixel area the shader renders to, for a given window size."""
        width, height = float(resolution.width), float(resolution.height)
        sv = self.shader_view
        return Rect(
            x=int(sv.x * width),
            y=int(sv.y * height),
            width=int(sv.width * width),
            height=int(sv.height * height),
        )

    def relative_remaining_width(self) -> float:
        """Fraction of the width left beside the shader view and its margins."""
        margin = self.shader_view.x
        return 1.0 - self.shader_view.width - self.shader_view.x - margin