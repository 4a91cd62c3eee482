import subprocess
import sys
import os
from pathlib import Path

def main():
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    sys.path.insert(0, src_path)
    from checkout_pricing.config.settings import get_settings
    settings = get_settings()

    print(f"Starting Checkout Pricing API on {settings.api_host}:{settings.api_port}...")
    print(f"Rules: {settings.rules_csv}")
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "checkout_pricing.api.main:app",
            "--host", settings.api_host,
            "--port", str(settings.api_port),
            "--reload"
        ], env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")

if __name__ == "__main__":
    main()
