# Centralized keymap for hotkeys and the in-app help list

KEYMAP = [
    {"keys": "Space", "action": "Run/Pause", "scene": "Simulation"},
    {"keys": ".", "action": "Step once", "scene": "Simulation"},
    {"keys": "R", "action": "Reset runner", "scene": "Simulation"},
    {"keys": "Up/Down", "action": "Speed +/- (max = warp)", "scene": "Simulation"},
    {"keys": "1/2", "action": "Alpha -/+", "scene": "Simulation"},
    {"keys": "3/4", "action": "Gamma -/+", "scene": "Simulation"},
    {"keys": "5/6", "action": "Epsilon -/+", "scene": "Simulation"},
    {"keys": "H", "action": "Toggle Q heatmap", "scene": "Simulation"},
    {"keys": "P", "action": "Toggle policy arrows", "scene": "Simulation"},
    {"keys": "Q", "action": "Toggle Q hover panel", "scene": "Simulation"},
    {"keys": "X", "action": "Toggle explored cells", "scene": "Simulation"},
    {"keys": "E", "action": "Edit maze layout", "scene": "Simulation"},
    {"keys": "Ctrl+S", "action": "Export runner JSON", "scene": "Simulation"},
    {"keys": "Ctrl+L", "action": "Import runner JSON", "scene": "Simulation"},
    {"keys": "Ctrl+P", "action": "Save screenshot", "scene": "Simulation"},
    {"keys": "Ctrl+X", "action": "Export episode history", "scene": "Simulation"},
    {"keys": "W", "action": "Wall tool", "scene": "Designer"},
    {"keys": "S", "action": "Start tool", "scene": "Designer"},
    {"keys": "G", "action": "Goal tool", "scene": "Designer"},
    {"keys": "E", "action": "Eraser tool", "scene": "Designer"},
    {"keys": "C", "action": "Clear all walls (press twice)", "scene": "Designer"},
    {"keys": "Enter", "action": "Save layout and reset runner", "scene": "Designer"},
    {"keys": "?", "action": "Show/hide help", "scene": "All"},
    {"keys": "Esc", "action": "Back/Exit", "scene": "All"},
]


def get_keymap(scene=None):
    if scene:
        return [k for k in KEYMAP if k["scene"] == scene or k["scene"] == "All"]
    return KEYMAP
