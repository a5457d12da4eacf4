#!/usr/bin/env python3
"""
Main script for running the chart statistics pipeline on a CSV file.
"""

# Pipeline overview:
# 1) Load a CSV table and extract the finite numeric values of one column,
#    optionally split by the categories of a grouping column.
# 2) Compute box-plot statistics, histogram bins, cumulative frequencies and
#    kernel density estimates per group.
# 3) Optionally fit a linear, polynomial or LOESS trend line between two
#    columns, with confidence and prediction bands.
# 4) Export summary tables as CSV and a themed four-panel summary figure.

import argparse
import logging
import os
import sys
import time

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler("chartstats.log", mode="w"),
    ],
)

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from chartstats.analysis import (
    build_summary_tables,
    fit_relationship,
    summarize_groups,
)
from chartstats.data_processing import load_table
from chartstats.output import save_tables_to_csv
from chartstats.plotting import STAT_THEMES, plot_statistical_summary
from chartstats.settings import (
    BIN_METHODS,
    DEFAULT_BANDWIDTH,
    DEFAULT_BIN_METHOD,
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_KERNEL,
    DEFAULT_LOESS_BANDWIDTH,
    DEFAULT_POLYNOMIAL_DEGREE,
    DEFAULT_REGRESSION_TYPE,
    DEFAULT_WHISKER_METHOD,
    KERNEL_TYPES,
    REGRESSION_TYPES,
    WHISKER_METHODS,
    BoxplotSettings,
    HistogramSettings,
    KDESettings,
    RegressionSettings,
)


def _bandwidth(text):
    """Parse ``--bandwidth`` as a rule name or a literal positive number."""
    try:
        return float(text)
    except ValueError:
        return text


def build_parser():
    parser = argparse.ArgumentParser(
        description="Compute box plot, histogram, KDE and regression statistics."
    )
    parser.add_argument("csv", help="Input CSV file with a header row")
    parser.add_argument("--column", required=True, help="Numeric column to summarize")
    parser.add_argument("--group-by", default=None, help="Optional category column")
    parser.add_argument("--x", default=None, help="Regression predictor column")
    parser.add_argument("--y", default=None, help="Regression response column")
    parser.add_argument(
        "--whisker-method", choices=WHISKER_METHODS, default=DEFAULT_WHISKER_METHOD
    )
    parser.add_argument("--bin-method", choices=BIN_METHODS, default=DEFAULT_BIN_METHOD)
    parser.add_argument("--bin-count", type=int, default=None)
    parser.add_argument("--bin-width", type=float, default=None)
    parser.add_argument("--kernel", choices=KERNEL_TYPES, default=DEFAULT_KERNEL)
    parser.add_argument(
        "--bandwidth",
        type=_bandwidth,
        default=DEFAULT_BANDWIDTH,
        help="'silverman', 'scott' or a positive number",
    )
    parser.add_argument(
        "--regression", choices=REGRESSION_TYPES, default=DEFAULT_REGRESSION_TYPE
    )
    parser.add_argument("--degree", type=int, default=DEFAULT_POLYNOMIAL_DEGREE)
    parser.add_argument(
        "--loess-bandwidth", type=float, default=DEFAULT_LOESS_BANDWIDTH
    )
    parser.add_argument("--confidence", type=float, default=DEFAULT_CONFIDENCE_LEVEL)
    parser.add_argument("--theme", choices=sorted(STAT_THEMES), default="grey")
    parser.add_argument("--output-dir", default="output")
    return parser


def main(argv=None):
    """Main execution function with step timing logs."""
    args = build_parser().parse_args(argv)

    start_time = time.time()
    logging.info("Initializing chart statistics pipeline for %s", args.csv)

    step_start = time.time()
    df = load_table(args.csv)
    logging.info("Table loading completed in %.2f seconds", time.time() - step_start)

    step_start = time.time()
    summaries = summarize_groups(
        df,
        args.column,
        args.group_by,
        boxplot=BoxplotSettings(whisker_method=args.whisker_method),
        histogram=HistogramSettings(
            bin_method=args.bin_method,
            bin_count=args.bin_count,
            bin_width=args.bin_width,
        ),
        kde=KDESettings(kernel=args.kernel, bandwidth=args.bandwidth),
    )
    step_duration = time.time() - step_start
    logging.info("Distribution summaries completed in %.2f seconds", step_duration)

    total_n = sum(s["boxplot"].n for s in summaries.values())
    if total_n == 0:
        logging.error(
            "Column %r has no numeric data. Terminating execution.", args.column
        )
        return 1
    logging.info(
        "Summarized %d values across %d group(s)", total_n, len(summaries)
    )

    x = y = regression = None
    if args.x and args.y:
        step_start = time.time()
        x, y, regression = fit_relationship(
            df,
            args.x,
            args.y,
            RegressionSettings(
                type=args.regression,
                polynomial_degree=args.degree,
                loess_bandwidth=args.loess_bandwidth,
                confidence_level=args.confidence,
            ),
        )
        step_duration = time.time() - step_start
        logging.info("Regression fit completed in %.2f seconds", step_duration)
        if regression is not None:
            logging.info(
                "%s fit: %s (R^2 = %.4f)",
                regression.type,
                regression.equation,
                regression.r_squared,
            )

    os.makedirs(args.output_dir, exist_ok=True)
    logging.info("Output directory ensured: %s", args.output_dir)

    step_start = time.time()
    tables = build_summary_tables(summaries, regression)
    csv_paths = save_tables_to_csv(
        tables,
        args.output_dir,
        outliers_by_group={g: s["boxplot"].outliers for g, s in summaries.items()},
    )
    figure_path = plot_statistical_summary(
        summaries,
        args.output_dir,
        theme=args.theme,
        regression=regression,
        x=x,
        y=y,
        value_label=args.column,
        name=f"statistical_summary_{args.column}",
    )
    step_duration = time.time() - step_start
    logging.info("Output generation completed in %.2f seconds", step_duration)

    logging.info(f"Total execution time: {time.time() - start_time:.2f} seconds")
    logging.info("Analysis pipeline completed successfully")
    logging.info("Generated output files:")
    for name, path in csv_paths.items():
        logging.info("  - %s: %s", name, path)
    logging.info("  - Statistical summary: %s", figure_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
