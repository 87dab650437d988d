"""
Restart-persistence smoke check.

Starts the server, registers a customer through the sign-up form, restarts
the server and signs the same customer in again.

    pip install -e ".[dev]"
    python verify_persistence.py

httpx comes from the ``dev`` extra.
"""

import os
import signal
import subprocess
import sys
import time

import httpx

BASE_URL = "http://127.0.0.1:3001"
SERVER_CMD = [sys.executable, "-m", "uvicorn", "carrental.app.main:app", "--host", "127.0.0.1", "--port", "3001"]

CUSTOMER = {
    "firstName": "Persist",
    "lastName": "Check",
    "email": "persist_check@carhire.com",
    "phone": "5550100",
    "password": "securePassword123",
}


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for _ in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def start_server(echo=False):
    env = {**os.environ, "DB_ECHO": "True" if echo else "False"}
    return subprocess.Popen(SERVER_CMD, stdout=subprocess.PIPE, stderr=subprocess.PIPE, env=env)


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def run_verification():
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server(echo=True)

    try:
        if not wait_for_server():
            stdout, stderr = proc.communicate(timeout=2)
            print("Server Stdout:", stdout.decode())
            print("Server Stderr:", stderr.decode())
            raise RuntimeError("Server start failed")

        print("\n--- [Step 2] Registering Customer ---")
        resp = httpx.post(f"{BASE_URL}/api/register", data=CUSTOMER)

        if resp.status_code == 400 and "already registered" in resp.text:
            print("⚠️ Customer already exists (persistence working from previous run?)")
        elif resp.status_code == 303:
            print("✅ Customer Registered Successfully")
        else:
            print(f"❌ Registration Failed: {resp.status_code} {resp.text}")
            raise RuntimeError("Registration failed")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2)

    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = start_server()

    try:
        if not wait_for_server():
            raise RuntimeError("Server restart failed")

        print("\n--- [Step 5] Logging In (Post-Restart) ---")
        resp = httpx.post(
            f"{BASE_URL}/api/login",
            data={"email": CUSTOMER["email"], "password": CUSTOMER["password"]}
        )
        token = resp.cookies.get("token")

        if resp.status_code != 303 or not token:
            print(f"❌ Login Failed (Persistence Issue?): {resp.status_code}")
            raise RuntimeError("Login failed after restart")
        print("✅ Login Successful (Customer Persisted!)")

        print("\n--- [Step 6] Verifying Identity ---")
        resp = httpx.get(f"{BASE_URL}/api/profile", headers={"Authorization": f"Bearer {token}"})
        if resp.status_code == 200:
            print("✅ Identity Verified")
            print(resp.json())
        else:
            print(f"❌ Identity Check Failed: {resp.status_code}")

    finally:
        print("\n--- [Step 7] Stopping Server ---")
        stop_server(proc2)


if __name__ == "__main__":
    run_verification()
