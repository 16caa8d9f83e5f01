"""
Example usage of stratamatch.

This script demonstrates manual stratification end to end:
1. Build a sample data set
2. Stratify it on two categorical covariates
3. Inspect the issue and strata tables
4. Pull out one stratum for matching
"""

import random

from pyspark.sql import SparkSession

from stratamatch import manual_stratify


def make_sample_data(spark, n=2000, seed=42):
    """Sample data with a binary treatment, two categorical covariates and an outcome."""
    rng = random.Random(seed)
    rows = []
    for i in range(n):
        b1 = rng.choice(["north", "south", "east"])
        b2 = rng.randint(0, 1)
        # Treatment probability depends on the covariates
        p_treat = 0.15 if b1 == "north" else 0.4 + 0.2 * b2
        treat = int(rng.random() < p_treat)
        outcome = rng.gauss(1.0 + 0.5 * treat + 0.3 * b2, 1.0)
        rows.append((i, treat, b1, b2, outcome))
    return spark.createDataFrame(rows, "id int, treat int, B1 string, B2 int, outcome double")


def main():
    """Run stratamatch example with generated data."""
    spark = (
        SparkSession.builder.master("local[*]")
        .appName("stratamatch-example")
        .config("spark.sql.shuffle.partitions", "4")
        .config("spark.ui.enabled", "false")
        .config("spark.driver.extraJavaOptions", "-Djava.security.manager=allow")
        .config("spark.executor.extraJavaOptions", "-Djava.security.manager=allow")
        .getOrCreate()
    )

    # 1. Sample data
    print("1. Generating sample data...")
    df = make_sample_data(spark)
    print(f"Generated {df.count()} rows")

    # 2. Stratify
    print("\n2. Stratifying on B1 and B2...")
    m_strat = manual_stratify(df, "treat ~ B1 + B2", verbose=True)

    # 3. Tables
    print("\n3. Strata table:")
    print(m_strat.strata_table.to_string(index=False))

    print("\nStrata with potential issues:")
    print(m_strat.strata_with_issues().to_string(index=False))

    print()
    print(m_strat.summary())

    # 4. One stratum, ready for a matching algorithm
    print("\n4. First stratum:")
    m_strat.get_stratum(1).show(5)

    spark.stop()


if __name__ == "__main__":
    main()
