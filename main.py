from speeddecor.asyncio_thread import EventLoopThread
from speeddecor.constants import Unit
from speeddecor.decorator import WC, DIDENT_RIGHT
from speeddecor.monitor import SpeedMonitor, TransferState
from speeddecor.speed import ewma_speed, average_speed
from concurrent.futures import CancelledError, TimeoutError

import os
import logging
import argparse
import time

UNITS = {"none": Unit.NONE, "kib": Unit.KIB, "kb": Unit.KB}


def main():
    parser = argparse.ArgumentParser(prog="speeddecor")
    parser.add_argument("url")
    parser.add_argument("-o", "--output", default="")
    parser.add_argument("--unit", choices=sorted(UNITS), default="kib")
    parser.add_argument("--fmt", default="% .1f")
    parser.add_argument("--age", type=float, default=None, help="EWMA age, defaults to 30 samples")
    parser.add_argument("--update-rate", type=float, default=0.5)
    parser.add_argument("--debug", action="store_true")

    args = parser.parse_args()

    logging.basicConfig()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)

    output_file = args.output or os.path.basename(args.url.split("?")[0]) or "download.bin"
    unit = UNITS[args.unit]
    monitor = SpeedMonitor(
        {
            "ewma": ewma_speed(unit, args.fmt, args.age, WC(width=12)),
            "avg": average_speed(unit, args.fmt, WC(width=12, conf=DIDENT_RIGHT)),
        },
        update_rate_seconds=args.update_rate,
        complete_message="done",
    )

    runner = EventLoopThread()
    future = runner.submit(monitor.download(args.url, output_file))

    finished = False
    while not finished:
        event = runner.run(monitor.get_oldest_event())
        if event is None:
            if future.done():
                break
            time.sleep(0.1)
            continue
        print(f"\r{event.downloaded_bytes:>12} | ewma {event.columns.get('ewma', '')} | avg {event.columns.get('avg', '')}", end="", flush=True)
        if event.state == TransferState.ERROR:
            print()
            logging.error(f"Download failed: {event.error_string}")
            finished = True
        elif event.state == TransferState.COMPLETED:
            print()
            logging.info(f"Saved {event.downloaded_bytes} bytes to {output_file}")
            finished = True

    logging.info("Shutting down speed monitor")
    try:
        runner.run(monitor.shutdown(), timeout=10)
    except TimeoutError:
        logging.warning("Speed monitor shutdown timed out.")
    except CancelledError:
        pass
    finally:
        logging.info("Shutting down event loop thread")
        runner.shutdown()


if __name__ == "__main__":
    main()
