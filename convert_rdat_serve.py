#!/usr/bin/python
# Script to convert a folder of BAM rdat files into MSE Data and Stock records

import argparse
import inspect
import json
import logging
import os
import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from export_records import write_record_nc
from rdat_standardize import stock_name
from rdat_to_data import rdat_to_Data
from rdat_to_stock import rdat_to_Stock
from species_info import load_species_table

logger = logging.getLogger(__name__)


def load_config(path: Optional[str]) -> Dict[str, Dict[str, Any]]:
    config: Dict[str, Dict[str, Any]] = {"data": {}, "stock": {}}
    if path is None:
        return config
    with open(path, "r", encoding="utf-8") as f:
        loaded = json.load(f)
    unknown = set(loaded) - {"data", "stock", "speciesTable"}
    if unknown:
        raise ValueError(f"Unknown sections in {path}: {', '.join(sorted(unknown))}")
    for section, assembler in (("data", rdat_to_Data), ("stock", rdat_to_Stock)):
        options = loaded.get(section, {})
        # rdat and the starting record are not options
        allowed = set(inspect.signature(assembler).parameters) - {"rdat", "Data", "Stock"}
        badOptions = set(options) - allowed
        if badOptions:
            raise ValueError(f"Unknown {section} options in {path}: {', '.join(sorted(badOptions))}")
        config[section].update(options)
    if loaded.get("speciesTable"):
        config["speciesTable"] = loaded["speciesTable"]
    return config


def load_rdat(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


# Convert one rdat file, returns the paths written
def convert_file(
    path: str,  # rdat json file
    outdir: str,  # output directory
    config: Dict[str, Dict[str, Any]],  # assembler options
    nsim: Optional[int] = None,  # overrides config nsim
) -> List[str]:
    rdat = load_rdat(path)
    dataOptions = dict(config.get("data", {}))
    stockOptions = dict(config.get("stock", {}))
    if nsim is not None:
        dataOptions["nsim"] = nsim
    if config.get("speciesTable"):
        table = load_species_table(config["speciesTable"])
        dataOptions["speciesTable"] = table
        stockOptions["speciesTable"] = table

    data = rdat_to_Data(rdat, **dataOptions)
    stock = rdat_to_Stock(rdat, **stockOptions)

    name = stock_name(rdat["info"]["species"])
    dataFile = os.path.join(outdir, f"{name}_Data.nc")
    stockFile = os.path.join(outdir, f"{name}_Stock.nc")
    write_record_nc(data, dataFile)
    write_record_nc(stock, stockFile)
    return [dataFile, stockFile]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='convert-rdat',
        description='Converts BAM rdat files (json) to MSE Data and Stock records')

    files = parser.add_argument_group(title='Paths', description='File paths for inputs/outputs')
    files.add_argument(dest='inputdir', help='Path to folder of rdat json files')
    files.add_argument(dest='outputdir', help='Path to output files')
    files.add_argument('-c', '--config', dest='config', help='Path to optional json file of conversion options', default=None)

    options = parser.add_argument_group(title='Conversion', description='Options for running the conversion')
    options.add_argument('-n', '--nsim', dest='nsim', help='Number of simulations (replicates)', type=int, default=None)
    options.add_argument('-w', '--workers', dest='workers', help='Number of worker processes', type=int, default=None)
    options.add_argument('-v', '--verbose', dest='verbose', help='Log conversion notices', action='store_true')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    # create output folder if does not exist
    if not os.path.exists(args.outputdir):
        os.makedirs(args.outputdir)
        logger.info('Creating output folder: ' + args.outputdir)

    paths = sorted(
        os.path.join(args.inputdir, f) for f in os.listdir(args.inputdir) if f.endswith('.json')
    )
    if len(paths) == 0:
        logger.warning(f"No rdat json files found in {args.inputdir}")
        return 0

    failed = 0
    with ProcessPoolExecutor(max_workers=args.workers) as executor:
        futures = {
            executor.submit(convert_file, path, args.outputdir, config, args.nsim): path
            for path in paths
        }
        with tqdm(total=len(futures), desc="rdat files") as bar:
            for future in as_completed(futures):
                path = futures[future]
                try:
                    written = future.result()
                    logger.info(f"{path} -> {', '.join(written)}")
                except Exception:
                    failed += 1
                    logger.exception(f"Could not convert {path}")
                bar.update(1)

    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
