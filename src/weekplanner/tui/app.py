from textual.app import App

from weekplanner.planner import PlannerController
from weekplanner.tui.planner_screen import PlannerScreen


class PlannerApp(App):
    TITLE = "Weekplanner"
    SUB_TITLE = "Weekly task planner"

    def __init__(self, controller: PlannerController) -> None:
        super().__init__()
        self.controller = controller

    def on_mount(self) -> None:
        self.push_screen(PlannerScreen(self.controller))


def main() -> None:
    from weekplanner.cli import build_controller

    PlannerApp(build_controller()).run()
