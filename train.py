"""Train the reference pipeline served by api.py.

Run:
  python train.py
"""
import json
import os
from pathlib import Path

import joblib
import numpy as np
from sklearn.datasets import load_breast_cancer
from sklearn.metrics import brier_score_loss, classification_report, roc_auc_score
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVC

from features import FEATURE_KEYS, FEATURES

# ---------- Paths ----------
ART = Path(os.getenv("ARTIFACTS_DIR", "artifacts")); ART.mkdir(exist_ok=True, parents=True)


def main() -> None:
    print("=" * 60)
    print("BREAST CANCER SVC TRAINING")
    print("=" * 60)

    # ---------- 1) Load ----------
    print("\n[1/4] Loading dataset...")
    data = load_breast_cancer()
    if list(data.feature_names) != list(FEATURES):
        raise SystemExit("Dataset feature order differs from the UI schema; refusing to train.")
    X = data.data
    # sklearn encodes malignant as 0; the UI contract is 0 = benign, 1 = malignant
    y = 1 - data.target
    print(f"   Loaded {len(X)} records, malignant rate: {y.mean():.2%}")

    # ---------- 2) Split ----------
    print("\n[2/4] Splitting data...")
    X_tr, X_te, y_tr, y_te = train_test_split(X, y, test_size=0.25, stratify=y, random_state=42)
    print(f"   Train: {len(X_tr)}, Test: {len(X_te)}")

    # ---------- 3) Fit ----------
    print("\n[3/4] Training StandardScaler -> SVC...")
    pipe = Pipeline([
        ("scaler", StandardScaler()),
        ("svc", SVC(kernel="rbf", C=1.0, probability=True, random_state=42)),
    ])
    pipe.fit(X_tr, y_tr)

    p_te = pipe.predict_proba(X_te)[:, 1]
    y_hat = pipe.predict(X_te)
    print(f"   Test accuracy: {(y_hat == y_te).mean():.3f}")
    print(f"   Test ROC AUC:  {roc_auc_score(y_te, p_te):.3f}")
    print(f"   Test Brier:    {brier_score_loss(y_te, p_te):.3f}")
    print(classification_report(y_te, y_hat, target_names=["benign", "malignant"]))

    # ---------- 4) Save ----------
    print("\n[4/4] Saving artifacts...")
    joblib.dump(pipe, ART / "model.pkl")
    meta = {
        "features": list(FEATURES),
        "ranges": {
            k: [float(np.min(X[:, i])), float(np.max(X[:, i]))]
            for i, k in enumerate(FEATURE_KEYS)
        },
        "classes": {"0": "benign", "1": "malignant"},
    }
    with open(ART / "feature_meta.json", "w") as f:
        json.dump(meta, f, indent=2)
    print(f"   Wrote {ART / 'model.pkl'} and {ART / 'feature_meta.json'}")
    print("=" * 60)


if __name__ == "__main__":
    main()
