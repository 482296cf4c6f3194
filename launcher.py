import logging
from argparse import ArgumentParser, Namespace
from signal import signal, SIGINT
from threading import Event

import cv2
import numpy as np

from lattesim.Main import Main
from lattesim.Settings import Settings
from lattesim.pour import ScriptedPour

if __name__ == '__main__':
    parser: ArgumentParser = ArgumentParser(description='Headless milk-into-coffee fluid simulation')
    parser.add_argument('-s',      '--settings',        type=str, default=None,     help='settings file (json)')
    parser.add_argument('-r',      '--resolution',      type=int, default=None,     help='grid cells per side')
    parser.add_argument('-t',      '--ticks',           type=int, default=600,      help='number of simulation ticks')
    parser.add_argument('-p',      '--pattern',         type=str, default='circle', choices=['line', 'circle'], help='scripted pour pattern')
    parser.add_argument('-o',      '--output',          type=str, default=None,     help='write the final dye field as png')
    parser.add_argument('-v',      '--verbose',         action='store_true',        help='debug logging')

    args: Namespace = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(message)s'
    )

    settings: Settings = Settings()
    if args.settings is not None:
        logging.info(f"Loading settings from: {args.settings}")
        settings = Settings.load(args.settings)
    if args.resolution is not None:
        settings.fluid.resolution = args.resolution

    fluid = settings.fluid
    duration: float = args.ticks * fluid.timestep * 0.5
    if args.pattern == 'line':
        source = ScriptedPour.line((0.3, 0.5), (0.7, 0.5), duration, fluid.timestep, settings.pour,
                                   fluid.splat_radius, fluid.splat_hardness, fluid.splat_amount)
    else:
        source = ScriptedPour.circle((0.5, 0.5), 0.15, 1.0, duration, fluid.timestep, settings.pour,
                                     fluid.splat_radius, fluid.splat_hardness, fluid.splat_amount)

    app = Main(settings, source)
    app.start()

    shutdown_event = Event()

    def signal_handler_exit(sig, frame) -> None:
        logging.info("Received interrupt signal, shutting down...")
        shutdown_event.set()

    signal(SIGINT, signal_handler_exit)

    for _ in range(args.ticks):
        if shutdown_event.is_set():
            break
        app.update()

    logging.info(f"Final: {app.stats()}")

    if args.output is not None:
        image: np.ndarray = (np.clip(app.fluid.dye[..., 0], 0.0, 1.0) * 255.0).astype(np.uint8)
        # row 0 is v = 0, flip so v grows upward in the image
        cv2.imwrite(args.output, np.flipud(image))
        logging.info(f"Wrote dye to {args.output}")

    app.stop()
