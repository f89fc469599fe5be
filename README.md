# trophysim

A simulator for an LED trophy: a pyramid with a logo of 106 RGB LEDs, a
base of 64 RGB LEDs along its four edges, and two white-only LEDs (one at
the back, one lighting the floor). It listens for WLED realtime UDP packets
and keeps track of the colour of every LED, so that an effect can be
developed and checked without the physical trophy at hand.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the simulator

```
trophysim
```

The simulator listens for UDP packets on port 3413, applies every packet it
understands to the LED state, and runs until it is interrupted (Ctrl+C).
When it stops, it writes the window, view and shader settings back to its
configuration file.

It reads its settings from `smiuluator.config` in the current directory, a
JSON file. If the file is missing, defaults are used. The file may hold:

- `window`: `x`, `y`, `width`, `height`,
- `view`: the shader area as fractions of the window (`x`, `y`, `width`,
  `height`),
- `shaders`: `vertex` and `fragment` file paths and `reload` (hot reload
  on or off),
- `params` and `options`: rendering parameters and switches,
- `trophy`: the placement of the `logo` (`x`, `y`, `z`, `width`, `height`)
  and of the `base` (`x`, `y`, `z`, `size`), from which all LED positions
  are recomputed.

Other paths can be given on the command line:

```
trophysim -c my.config -v vertex.glsl -f fragment.glsl
```

- `-c` the configuration file,
- `-v` a custom vertex shader,
- `-f` a custom fragment shader.

A path that does not exist is reported and ignored. Without custom shader
paths, the shader files are read from `./shaders/vertex.glsl` and
`./shaders/fragment.glsl`; if a shader file cannot be found, the simulator
reports the error and exits with status 1. While hot reload is on, the
shader files are read again whenever one of them changes.

### Supported protocols

The first byte of a packet selects the protocol, the second is the timeout
in seconds, where 255 means "no timeout":

| Byte | Protocol | Payload                                  |
|------|----------|------------------------------------------|
| 1    | WARLS    | `INDEX R G B INDEX R G B ...`            |
| 2    | DRGB     | `R G B R G B ...` from LED 0 on          |
| 4    | DNRGB    | start index (2 bytes), then `R G B ...`  |

Packets shorter than two bytes, with any other protocol byte, or ending in
the middle of an LED's colour are unreadable and leave the LEDs unchanged.
Colours sent to a white-only LED are reduced to their gray value.

## Sending test patterns

```
trophysim-mock-sender
```

sends a test pattern to `localhost:3413` as WARLS packets, eleven times over
(the pattern plus ten repeats). Options:

- `--host`, `--port`: where to send to,
- `--pattern`: `logoblink` (the default), `lauflichter` (a running light on
  the base), or any other name for a plain pattern over all LEDs,
- `--repeats`: how often the pattern is repeated,
- `--drgb`: send DRGB packets instead of WARLS,
- `--debug`: print a line for every packet sent.

## Using the package as a library

```python
from trophysim.udp_interpreter import interpret
from trophysim.udp_listener import RawMessage

message = interpret(RawMessage(values=[1, 255, 0, 255, 0, 0], source="127.0.0.1:5000"))
print(message.mapping)   # {0: Led(r=255, g=0, b=0)}
```

- `trophysim.trophy.Trophy` computes the 3D position of every LED from the
  logo and base placement; `debug_report()` lists them.
- `trophysim.shader_state.ShaderState` holds the colours, rendering
  `Parameters` and `ShaderOptions` of a trophy, and `pack()` gives them as
  one binary buffer.
- `trophysim.udp_listener.UdpListener` receives packets without blocking;
  `trophysim.udp_interpreter.interpret` turns one into a `ProtocolMessage`
  or an `UnreadableMessage`.
- `trophysim.mock_sender.create_warls` and `create_drgb` build packets of
  your own; `create_pattern` and `send_all` play whole patterns.
- `trophysim.config.Config` reads and stores the configuration file.
- `trophysim.simulator.Simulator` ties these together. Its `handle_key`
  reacts on key release: Escape stops the run, F1 toggles verbose output
  (unreadable packets are then printed), and G, A, S and F toggle the
  grid, accumulate-forever, no-stochastic-variation and
  only-pyramid-frame options. `handle_mouse` tracks clicks inside the
  shader area.
- `trophysim.websocket_listener.WebSocketListener` connects to
  `ws://<endpoint>`, asks for the live view and queues the frames it
  receives; `interpret_liveview` parses a single frame. The simulator does
  not use it.
- `trophysim.monitor.PerformanceMonitor` writes logged entries and observed
  values to a file from a background thread.

## What this package does not do

There is no window, no picture and no control panel: the simulator keeps
the LED state, the shader sources and the shader uniforms up to date, but
it does not compile the shaders or draw the trophy. Keys and the mouse are
only handled where a program calls `Simulator.handle_key` and
`Simulator.handle_mouse`. The UDP port is fixed at 3413 for the command;
it is not read from the configuration file.