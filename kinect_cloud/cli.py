import argparse
import logging
import sys

from . import settings
from .app import App
from .errors import KinectError


logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Show color, registered depth and the colored point cloud of an Azure Kinect."
    )
    parser.add_argument("-d", "--device", default=0, type=int, help="device index (default: 0)")
    parser.add_argument("-o", "--output_dir", default=settings.DEFAULT_OUTPUT_DIR, type=str,
                        help="where 's' saves point clouds")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(verbose: bool = False):
    formatter = logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s')
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root = logging.getLogger("kinect_cloud")
    root.addHandler(console_handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    # pyk4a needs the native k4a library, load it only when a device is used
    from .sdk import K4ASdk

    try:
        frames = App(K4ASdk(), device_index=args.device, output_dir=args.output_dir).run()
    except KinectError as e:
        logger.error("%s", e)
        return 1
    logger.info("presented %d frames", frames)
    return 0


if __name__ == "__main__":
    sys.exit(main())
