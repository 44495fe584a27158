"""
main.py — Bootstrap

1. Load data/tuning.toml → TourSettings
2. Load the room graph (hand-written regions + generated fill-ins)
3. Load the start region
4. Create the app, push the tour scene
5. Run
"""

from pathlib import Path

from core import tuning
from core.app import App
from scenes.tour_scene import TourScene
from tour.settings import TourSettings
from tour.world_model import RoomGraph


WORLD_FILE = Path(__file__).resolve().parent / "data" / "world.toml"


def main():
    tuning.load()
    settings = TourSettings.from_tuning(tuning.section("tour"))

    world_cfg = tuning.section("world")
    world = RoomGraph.from_toml(
        WORLD_FILE,
        cycle_length=float(world_cfg.get("cycle_length", 600.0)),
        reload_delay=float(world_cfg.get("reload_delay", 1.0)),
        autogenerate=True,
        seed=world_cfg.get("seed"),
    )
    world.load_region(settings.start_region)

    app = App(title="Tourguide", width=960, height=640)
    app.push_scene(TourScene(world, settings,
                             scale=float(world_cfg.get("scale", 2.5))))
    app.run()


if __name__ == "__main__":
    main()
