import numpy as np
import pandas as pd
from isrweights import build_dataset, compute_weights, normalize_weights

rng = np.random.default_rng(0)
X = rng.uniform(-1.0, 1.0, size=(60, 2))
y = np.sin(3 * X[:, 0]) + 0.5 * X[:, 1]

ds = build_dataset(X, y, k=5, space="x", p=2.0)

table = pd.DataFrame({
    scheme: compute_weights(ds, scheme, 2.0, on_error="nan")
    for scheme in ["proximity-x", "surrounding-x", "nonlinearity", "remoteness-x"]
})
table["nonlinearity_sum"] = normalize_weights(table["nonlinearity"], "sum")
print(table.describe())

try:
    table.to_parquet("weights.parquet")
    print("Saved to weights.parquet")
except Exception as e:
    print(f"Parquet not available ({e}); saving CSV instead.")
    table.to_csv("weights.csv")
