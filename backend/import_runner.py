"""
Command-line CSV import:
- Waits for the API to come up
- Uploads the CSV via POST /transactions/upload
- Prints what was inserted/skipped and the new ledger total
"""
import os, sys, time
from pathlib import Path

import requests

API = os.environ.get("LEDGER_API_BASE", "http://localhost:8000")

def wait_api(attempts=60):
    for _ in range(attempts):
        try:
            r = requests.get(f"{API}/healthz", timeout=2)
            if r.ok:
                return
        except requests.RequestException:
            pass
        time.sleep(1)
    raise RuntimeError("API did not become healthy")

def error_message(r):
    # proxies and crashed servers may answer with HTML, not our JSON errors
    try:
        body = r.json()
    except ValueError:
        return r.text.strip() or r.reason
    if not isinstance(body, dict):
        return str(body)
    detail = f" ({body['error']})" if body.get("error") else ""
    return f"{body.get('message')}{detail}"

def upload_csv(csv_path):
    with open(csv_path, "rb") as f:
        files = {"file": (Path(csv_path).name, f, "text/csv")}
        r = requests.post(f"{API}/transactions/upload", files=files, timeout=120)
    if not r.ok:
        raise RuntimeError(f"{r.status_code}: {error_message(r)}")
    return r.json()

def ledger_total():
    r = requests.get(f"{API}/transactions", params={"page": 1, "limit": 1}, timeout=30)
    r.raise_for_status()
    return r.json()["total"]

def main(csv_path):
    wait_api()
    result = upload_csv(csv_path)
    print(f"inserted: {result['inserted']}  (unconverted: {result['degraded']})")
    for rej in result["rejected"]:
        print(f"  skipped line {rej['row']}: {rej['reason']}")
    print(f"ledger total: {ledger_total()}")

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python import_runner.py <path/to/transactions.csv>")
        sys.exit(1)
    try:
        main(sys.argv[1])
    except RuntimeError as e:
        print(f"import failed: {e}")
        sys.exit(1)
