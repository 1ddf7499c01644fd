#!/usr/bin/env python3
"""
Manual smoke test against a running server.

Logs in with the user seeded by ``manage.py populate_data`` and walks the
doctor, patient and consultation endpoints, printing one line per call.
Exit status is non-zero when any call returned an unexpected status.

    API_BASE_URL=http://127.0.0.1:8000 python api_smoke_test.py
"""
import os
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import requests

BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
API = f"{BASE_URL}/api/v1.0"
LOGIN = os.getenv("API_LOGIN", "api")
PASSWORD = os.getenv("API_PASSWORD", "P@ssw0rd1")


@dataclass
class CallResult:
    success: bool
    method: str
    url: str
    status_code: int
    response_time: float
    error_message: str = ""


class SmokeTester:
    def __init__(self):
        self.session = requests.Session()
        self.results = []
        self.refresh = None

    def call(self, method: str, url: str, data: Optional[Dict[str, Any]] = None,
             expected_status: int = 200) -> Optional[Dict[str, Any]]:
        start = time.time()
        try:
            response = self.session.request(method, url, json=data)
        except requests.RequestException as e:
            self.results.append(CallResult(False, method, url, 0, time.time() - start, str(e)))
            print(f"ERR  {method} {url}: {e}")
            return None

        elapsed = time.time() - start
        ok = response.status_code == expected_status
        self.results.append(CallResult(ok, method, url, response.status_code, elapsed,
                                       "" if ok else response.text[:200]))
        print(f"{'OK  ' if ok else 'FAIL'} {method} {url} -> {response.status_code} ({elapsed:.2f}s)")
        try:
            return response.json()
        except ValueError:
            return None

    def login(self) -> bool:
        body = self.call("POST", f"{BASE_URL}/api/auth/login", {"login": LOGIN, "password": PASSWORD})
        if not body or not body.get("token"):
            return False
        self.session.headers["Authorization"] = f"Bearer {body['token']}"
        self.refresh = body.get("refresh")
        return True

    def run(self) -> bool:
        self.call("GET", f"{BASE_URL}/healthz")
        if not self.login():
            print("Login failed; did you run `manage.py populate_data`?")
            return False

        suffix = datetime.now().strftime("%H%M%S")
        address = {"street": "Rua A", "neighborhood": "Centro", "zipCode": "01001000",
                   "city": "Sao Paulo", "state": "SP"}
        doctor = self.call("POST", f"{API}/doctors", {
            "name": "Smoke Doctor", "email": f"smoke{suffix}@voll.med", "crm": suffix,
            "telephone": "11999990000", "specialty": "CARDIOLOGY", "address": address,
        }, expected_status=201)
        patient = self.call("POST", f"{API}/patients", {
            "name": "Smoke Patient", "email": f"smoke{suffix}@example.com", "cpf": f"00000{suffix}",
            "telephone": "11988880000", "address": address,
        }, expected_status=201)
        self.call("GET", f"{API}/doctors")
        self.call("GET", f"{API}/patients")

        if doctor and patient:
            day = datetime.now() + timedelta(days=7)
            if day.weekday() == 6:
                day += timedelta(days=1)
            when = day.replace(hour=10, minute=0, second=0, microsecond=0)
            consultation = self.call("POST", f"{API}/consultations", {
                "patientId": patient["data"]["id"], "doctorId": doctor["data"]["id"],
                "consultationDate": when.isoformat(),
            }, expected_status=201)
            if consultation:
                cid = consultation["data"]["id"]
                self.call("GET", f"{API}/consultations/{cid}")
                self.call("PATCH", f"{API}/consultations",
                          {"consultationId": cid, "reasonCancellation": "OTHERS"})
            self.call("PATCH", f"{API}/doctors/{doctor['data']['id']}")
            self.call("PATCH", f"{API}/patients/{patient['data']['id']}")

        self.call("GET", f"{API}/consultations?includeCanceled=true")
        self.call("POST", f"{BASE_URL}/api/auth/logout", {"refresh": self.refresh})
        return all(r.success for r in self.results)

    def report(self):
        failed = [r for r in self.results if not r.success]
        print(f"\n{len(self.results)} calls, {len(failed)} failed")
        for r in failed:
            print(f"  {r.method} {r.url} [{r.status_code}] {r.error_message}")


def main():
    tester = SmokeTester()
    ok = tester.run()
    tester.report()
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
