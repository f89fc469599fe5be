"""Shader sources, uniforms and the reload logic of the trophy renderer."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from trophysim.config import Config, ensure_file, first_if_exists

DEFAULT_VERTEX_SHADER_PATH = "./shaders/vertex.glsl"
DEFAULT_FRAGMENT_SHADER_PATH = "./shaders/fragment.glsl"

ONLY_LEDS_PASS = 0
SCENE_PASS = 1
POST_PASS = 2

# The vertex shader must declare its position attribute at this location.
POSITION_ATTRIBUTE_LOCATION = 0

GL_FRAMEBUFFER_COMPLETE = 0x8CD5
GL_FRAMEBUFFER_UNDEFINED = 0x8219
GL_FRAMEBUFFER_INCOMPLETE_ATTACHMENT = 0x8CD6
GL_FRAMEBUFFER_INCOMPLETE_MISSING_ATTACHMENT = 0x8CD7
GL_FRAMEBUFFER_INCOMPLETE_DRAW_BUFFER = 0x8CDB
GL_FRAMEBUFFER_INCOMPLETE_READ_BUFFER = 0x8CDC
GL_FRAMEBUFFER_UNSUPPORTED = 0x8CDD
GL_FRAMEBUFFER_INCOMPLETE_MULTISAMPLE = 0x8D56
GL_FRAMEBUFFER_INCOMPLETE_LAYER_TARGETS = 0x8DA8

_STATUS_MESSAGES = {
    GL_FRAMEBUFFER_COMPLETE: "Framebuffer complete",
    GL_FRAMEBUFFER_UNDEFINED: "Framebuffer undefined",
    GL_FRAMEBUFFER_INCOMPLETE_ATTACHMENT: "Framebuffer incomplete attachment",
    GL_FRAMEBUFFER_INCOMPLETE_MISSING_ATTACHMENT: "Framebuffer incomplete missing attachment",
    GL_FRAMEBUFFER_INCOMPLETE_DRAW_BUFFER: "Framebuffer incomplete draw pbo",
    GL_FRAMEBUFFER_INCOMPLETE_READ_BUFFER: "Framebuffer incomplete read pbo",
    GL_FRAMEBUFFER_UNSUPPORTED: "Framebuffer unsupported",
    GL_FRAMEBUFFER_INCOMPLETE_MULTISAMPLE: "Framebuffer incomplete multisample",
    GL_FRAMEBUFFER_INCOMPLETE_LAYER_TARGETS: "Framebuffer incomplete layer targets",
}


def framebuffer_status_message(status: int) -> str:
    """The text for a framebuffer status code; KeyError for unknown codes."""
    return _STATUS_MESSAGES[status]


def quad_vertices() -> tuple[float, ...]:
    """Two triangles covering the whole clip space, three floats per vertex."""
    left, bottom, right, top = -1.0, -1.0, 1.0, 1.0
    return (
        left, bottom, 0.0,
        right, top, 0.0,
        left, top, 0.0,
        left, bottom, 0.0,
        right, bottom, 0.0,
        right, top, 0.0,
    )


class ShaderKind(Enum):
    VERTEX = "Vertex"
    FRAGMENT = "Fragment"


@dataclass
class ShaderSource:
    """The text of one shader file, when it was read and its last error."""

    kind: ShaderKind
    source: str = ""
    file_path: str = ""
    file_time: int | None = None
    error: str = ""

    def read(self, path: str) -> None:
        """Read the shader from ``path``; FileNotFoundError if it is missing."""
        ensure_file(path)
        self.file_path = path
        self.reload()

    def reload(self) -> None:
        """Read the current file again and remember its modification time."""
        with open(self.file_path, encoding="utf-8") as file:
            self.source = file.read()
        self.file_time = os.stat(self.file_path).st_mtime_ns

    def file_has_changed(self) -> bool:
        return os.stat(self.file_path).st_mtime_ns != self.file_time


T = TypeVar("T")


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Uniform(Generic[T]):
    """A named shader input with its current value and location."""

    def __init__(self, name: str, value: T | None = None) -> None:
        self.name = name
        self.value = value
        self.location = -1
        self.tried_load_location = False
        self._has_warned = False

    def load_location(self, location: int) -> None:
        """Record the location the program reported for this uniform."""
        self.location = location
        self.tried_load_location = True

    def set(self, value: T | None = None) -> bool:
        """Take ``value`` (if given); return whether it can be uploaded."""
        if value is not None:
            self.value = value
        if self.location < 0:
            if not self.tried_load_location and not self._has_warned:
                print(f"Uniform was never initialized: {self.name}", file=sys.stderr)
                self._has_warned = True
            return False
        return True

    def __str__(self) -> str:
        value = self.value
        if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 4:
            text = "vec4({})".format(", ".join(_format_value(v) for v in value))
        else:
            text = _format_value(value)
        if self.tried_load_location:
            return f"{self.name} = {text} (location {self.location})"
        return f"{self.name} = {text} (no location)"


@dataclass
class PingPong:
    """Alternates between two buffers: one is written while the other is read."""

    count: int = 2
    cursor: int = 0

    def order(self) -> tuple[int, int]:
        """(buffer to write, buffer to read)."""
        return self.cursor, (self.cursor + 1) % self.count

    def advance(self) -> tuple[int, int]:
        """The current order; afterwards the roles are swapped."""
        result = self.order()
        self.cursor = result[1]
        return result


@dataclass
class CompileResult:
    """Error logs of compiling both shaders and linking them; empty if fine."""

    vertex_error: str = ""
    fragment_error: str = ""
    link_error: str = ""


CompileProgram = Callable[[str, str], CompileResult]


@dataclass
class ShaderSet:
    """The vertex and fragment shader of the renderer and their reload state."""

    vertex: ShaderSource = field(init=False)
    fragment: ShaderSource = field(init=False)
    link_error: str = field(init=False, default="")
    last_reload: datetime | None = field(init=False, default=None)
    reload_failed: bool = field(init=False, default=False)

    def __init__(self, config: Config) -> None:
        self.vertex = ShaderSource(ShaderKind.VERTEX)
        self.fragment = ShaderSource(ShaderKind.FRAGMENT)
        self.link_error = ""
        self.last_reload = None
        self.reload_failed = False
        self.vertex.read(
            first_if_exists(config.custom_vertex_shader_path, DEFAULT_VERTEX_SHADER_PATH)
        )
        self.fragment.read(
            first_if_exists(config.custom_fragment_shader_path, DEFAULT_FRAGMENT_SHADER_PATH)
        )

    def reload(self, compile_program: CompileProgram) -> bool:
        """Read both files again and compile them; return whether it worked."""
        self.vertex.reload()
        self.fragment.reload()
        self.last_reload = datetime.now()

        result = compile_program(self.vertex.source, self.fragment.source)
        self.vertex.error = result.vertex_error
        self.fragment.error = result.fragment_error
        total_error = self.collect_error_logs(result.link_error)
        self.reload_failed = bool(total_error)
        if self.reload_failed:
            print(total_error, file=sys.stderr)
            return False
        self.link_error = result.link_error
        return True

    def might_hot_reload(self, config: Config, compile_program: CompileProgram) -> str | None:
        """Reload if enabled and a file changed; return the report line if so."""
        if not config.hot_reload_shaders:
            return None
        vertex_changed = self.vertex.file_has_changed()
        fragment_changed = self.fragment.file_has_changed()
        if not vertex_changed and not fragment_changed:
            return None

        self.reload(compile_program)
        message, error = self.last_reload_info()
        line = f"Hot Reload: {message}"
        if error:
            line += f" -- {error}"
        if not fragment_changed:
            line += f" -- Vertex Shader: {self.vertex.file_path}"
        elif not vertex_changed:
            line += f" -- Fragment Shader: {self.fragment.file_path}"
        else:
            line += " -- Fragment & Vertex Shader."
        print(line)
        return line

    def collect_error_logs(self, link_error: str | None = None) -> str:
        """All current shader errors, plus the given or the current link error."""
        result = ""
        if self.vertex.error:
            result += (
                f"Error in Vertex Shader: {self.vertex.file_path}\n{self.vertex.error}\n"
            )
        if self.fragment.error:
            result += (
                f"Error in Fragment Shader: {self.fragment.file_path}\n{self.fragment.error}\n"
            )
        linker = self.link_error if link_error is None else link_error
        if linker:
            result += f"Shader Linker Error:\n{linker}\n"
        return result

    def last_reload_info(self) -> tuple[str, str]:
        """(status message, error logs); both empty before the first reload."""
        if self.last_reload is None:
            return "", ""
        if self.reload_failed:
            return "! FAILED !", self.collect_error_logs()
        return f"-- last: {self.last_reload:%H:%M:%S}", ""