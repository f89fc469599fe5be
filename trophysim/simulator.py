"""The trophy simulator: LED state driven by UDP packets, keys and the mouse."""

from __future__ import annotations

import math
import sys
import time
from collections.abc import Callable, Sequence
from enum import IntEnum

from trophysim.config import Config
from trophysim.geometry import Coord, Rect, Size, outside_rect
from trophysim.shader import CompileResult, ShaderSet, Uniform
from trophysim.shader_state import ExtraOutputs, ShaderState
from trophysim.timefmt import format_time
from trophysim.trophy import Trophy
from trophysim.udp_interpreter import ProtocolMessage, UnreadableMessage, interpret
from trophysim.udp_listener import RawMessage, UdpListener

TITLE = "QM's DL Trophy Smiuluator"
FPS_SAMPLES = 10
FRAME_SECONDS = 1.0 / 60.0
MEANS_UNSET = -1.0


class Key(IntEnum):
    """Key codes the simulator reacts to."""

    A = 65
    F = 70
    G = 71
    S = 83
    ESCAPE = 256
    F1 = 290


class Action(IntEnum):
    """What happened to a key."""

    RELEASE = 0
    PRESS = 1
    REPEAT = 2


def _accept_sources(vertex_source: str, fragment_source: str) -> CompileResult:
    """Without a graphics context, shader sources are taken as they are."""
    return CompileResult()


class Simulator:
    """Holds the trophy state and reacts to time, input and UDP packets."""

    def __init__(self, config: Config) -> None:
        self.config = config
        self.should_close = False
        self.compile_program: Callable[[str, str], CompileResult] = _accept_sources

        initial = Rect(x=0, y=0, width=config.window_size.width, height=config.window_size.height)
        self.window_rect = config.restore_window(initial, Coord(0, 0))
        self.area = Size(self.window_rect.width, self.window_rect.height)

        self.trophy = Trophy()
        self.state = ShaderState(self.trophy)
        config.restore_state(self.state)

        self.shaders = ShaderSet(config)
        self._compile_initial()

        self.i_rect: Uniform[tuple[float, float, float, float]] = Uniform("iRect")
        self.i_time: Uniform[float] = Uniform("iTime", 0.0)
        self.i_fps: Uniform[float] = Uniform("iFPS", 0.0)
        self.i_frame: Uniform[int] = Uniform("iFrame", 0)
        self.i_mouse: Uniform[list[float]] = Uniform("iMouse", [MEANS_UNSET] * 4)
        self.extra_outputs = ExtraOutputs()
        self.should_read_extra_outputs = False
        self.reading_from_ping_index = -1
        self._on_rect_change(self.area)

        self.start_timestamp = 0.0
        self.latest_timestamp = 0.0
        self.current_time = 0.0
        self.previous_time = 0.0
        self.current_frame = 0
        self.current_fps = 0.0
        self.last_fps = [0.0] * FPS_SAMPLES
        self.average_fps = 0.0

        self.udp_listener = UdpListener(config.udp_port)
        self.last_udp_message: ProtocolMessage | None = None

        self.key_down: dict[int, bool] = {}
        self.key_map: dict[int, Callable[[], None]] = {
            Key.ESCAPE: self._request_close,
            Key.F1: self._toggle_verbose,
            Key.G: lambda: self._toggle_option("show_grid"),
            Key.A: lambda: self._toggle_option("accumulate_forever"),
            Key.S: lambda: self._toggle_option("no_stochastic_variation"),
            Key.F: lambda: self._toggle_option("only_pyramid_frame"),
        }

    def _compile_initial(self) -> None:
        result = self.compile_program(self.shaders.vertex.source, self.shaders.fragment.source)
        self.shaders.vertex.error = result.vertex_error
        self.shaders.fragment.error = result.fragment_error
        self.shaders.link_error = result.link_error
        errors = self.shaders.collect_error_logs()
        if errors:
            print(errors, file=sys.stderr)

    def _on_rect_change(self, area: Size) -> None:
        rect = self.config.shader_rect(area)
        self.i_rect.value = (float(rect.x), float(rect.y), float(rect.width), float(rect.height))
        self.extra_outputs.initialize(rect)

    def _request_close(self) -> None:
        self.should_close = True

    def _toggle_verbose(self) -> None:
        self.state.verbose = not self.state.verbose

    def _toggle_option(self, name: str) -> None:
        options = self.state.options
        setattr(options, name, not getattr(options, name))

    def handle_time(self, timestamp: float) -> float:
        """Advance one frame at ``timestamp`` seconds; return the averaged FPS."""
        self.current_frame += 1
        self.previous_time = self.current_time
        self.latest_timestamp = timestamp
        self.current_time = self.latest_timestamp - self.start_timestamp
        delta = self.current_time - self.previous_time
        self.current_fps = 1.0 / delta if delta != 0 else math.inf

        self.last_fps[self.current_frame % FPS_SAMPLES] = self.current_fps
        self.average_fps = (
            self.current_fps if self.current_frame < FPS_SAMPLES else self.calc_average_fps()
        )
        return self.average_fps

    def calc_average_fps(self) -> float:
        return sum(self.last_fps) / FPS_SAMPLES

    def handle_key(self, key: int, action: int) -> None:
        """Run a key's command when it is released after having been pressed."""
        if action == Action.PRESS and not self.key_down.get(key, False):
            self.key_down[key] = True
        elif action == Action.RELEASE and self.key_down.get(key, False):
            command = self.key_map.get(key)
            if command is not None:
                command()

    def handle_mouse(self, x: float, y: float, pressed: bool) -> tuple[float, ...]:
        """Update the mouse uniform from a window position (y pointing down)."""
        mouse_x = float(x)
        mouse_y = float(self.area.height) - float(y)
        if outside_rect(mouse_x, mouse_y, self.i_rect.value):
            mouse_x = mouse_y = MEANS_UNSET
        mouse = self.i_mouse.value
        mouse[0], mouse[1] = mouse_x, mouse_y

        if pressed:
            if mouse[2] == MEANS_UNSET or mouse[3] == MEANS_UNSET:
                mouse[2], mouse[3] = mouse_x, mouse_y
                if mouse_x != MEANS_UNSET and mouse_y != MEANS_UNSET:
                    self.should_read_extra_outputs = True
        elif not self.should_read_extra_outputs and self.reading_from_ping_index < 0:
            mouse[2] = mouse[3] = MEANS_UNSET
        return tuple(mouse)

    def handle_packet(self, raw: RawMessage) -> ProtocolMessage | UnreadableMessage:
        """Apply one received packet to the LED state."""
        message = interpret(raw)
        if isinstance(message, ProtocolMessage):
            self.state.set_multiple(message.mapping)
            self.last_udp_message = message
        elif self.state.verbose:
            print(message.debug_line())
        return message

    def handle_messages(self) -> ProtocolMessage | UnreadableMessage | None:
        """Handle a waiting packet, reopening the listener if the port changed."""
        if not self.udp_listener.runs_on(self.config.udp_port):
            self.udp_listener.close()
            self.udp_listener = UdpListener(self.config.udp_port)
        packet = self.udp_listener.listen()
        if packet is None:
            return None
        return self.handle_packet(packet)

    def _handle_extra_outputs(self) -> None:
        if not self.should_read_extra_outputs:
            return
        self.should_read_extra_outputs = False
        print(self.extra_outputs.interpret_values(self.i_mouse.value))

    def debug_report(self) -> str:
        """Trophy positions, option bits and the last interpreted UDP message."""
        lines = [self.trophy.debug_report()]
        options = int.from_bytes(self.state.options.pack(), "little", signed=True)
        bits = "".join(
            str((options >> i) & 1) + (" " if i % 8 == 0 else "") for i in range(31, -1, -1)
        )
        lines.append(f"[Debug State] int options = {options} -> 32 bit: {bits}")
        lines.append(
            f"[UdpListener] # Packages Received: {self.udp_listener.received_packages}"
        )
        message = self.last_udp_message
        if message is None:
            lines.append("[UdpListener] got no interpretable Message so far.")
            return "\n".join(lines)
        lines.append(f"[UdpListener] last Message from {format_time(message.timestamp)}")
        for index, led in sorted(message.mapping.items()):
            lines.append(f"    Index {index:3d}: {led}")
        lines.append(f"    Source: {message.source}")
        return "\n".join(lines)

    def run(self, max_frames: int | None = None) -> int:
        """Run frames until closed (or ``max_frames``); store the config after."""
        self.start_timestamp = time.monotonic()
        self.current_time = 0.0
        self.current_frame = 0
        self.current_fps = 0.0
        try:
            while not self.should_close:
                if max_frames is not None and self.current_frame >= max_frames:
                    break
                self.handle_time(time.monotonic())
                self.i_time.value = self.current_time
                self.i_frame.value = self.current_frame
                self.i_fps.value = self.average_fps
                self._handle_extra_outputs()
                self.handle_messages()
                self.shaders.might_hot_reload(self.config, self.compile_program)
                time.sleep(FRAME_SECONDS)
        except KeyboardInterrupt:
            pass
        self.config.store(self.window_rect)
        return self.current_frame

    def close(self) -> None:
        self.udp_listener.close()

    def __enter__(self) -> Simulator:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def main(argv: Sequence[str] | None = None) -> int:
    try:
        config = Config.from_argv(argv)
        with Simulator(config) as simulator:
            simulator.run()
        return 0
    except Exception as error:  # noqa: BLE001 - top-level report
        print(f"ERROR: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())