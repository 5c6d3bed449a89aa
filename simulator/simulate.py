import time, random, argparse, json, datetime, urllib.request
BASELINE = {"temperature": 24.0, "pH": 7.4, "TDS": 250.0, "turbidity": 2.0, "ORP": 450.0, "waterLevel": 80.0}
SPREAD = {"temperature": 0.3, "pH": 0.05, "TDS": 8.0, "turbidity": 0.4, "ORP": 15.0, "waterLevel": 1.5}
def post(api, path, payload):
    req = urllib.request.Request(api + path, data=json.dumps(payload).encode('utf-8'), headers={'Content-Type':'application/json'})
    with urllib.request.urlopen(req, timeout=10) as resp:
        return json.loads(resp.read().decode())
def step(state, drift):
    # random walk, with an optional push out of the safe range
    for k in state:
        state[k] += random.gauss(0, SPREAD[k]) + drift * SPREAD[k]
    state["turbidity"] = max(state["turbidity"], 0.0)
    state["waterLevel"] = max(state["waterLevel"], 0.0)
    return state
def main():
    p = argparse.ArgumentParser()
    p.add_argument('--api', default='http://localhost:8000')
    p.add_argument('--location', type=int, default=0)
    p.add_argument('--rate', type=float, default=10.0)
    p.add_argument('--drift', type=float, default=0.0)
    args = p.parse_args()
    print(f"Streaming to {args.api} for location {args.location} every {args.rate}s... CTRL+C to stop")
    state = dict(BASELINE)
    while True:
        step(state, args.drift)
        payload = {"location": args.location,
            "timestamp": datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            **{k: round(v, 2) for k, v in state.items()}}
        try: post(args.api, "/readings/", payload); print("Sent", payload)
        except Exception as e: print("Error:", e)
        time.sleep(args.rate)
if __name__ == "__main__": main()
