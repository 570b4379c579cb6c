"""
Example API client for the acts_as_label lookup service.

Start the service first, for example:

    python main.py --seed examples/labels.yaml
"""

import requests


def main() -> None:
    """Example usage of the label lookup API."""
    api_url = "http://localhost:8000"

    print("acts_as_label API Example\n")

    # Check if the API is running
    try:
        response = requests.get(f"{api_url}/health")
        if response.status_code != 200:
            print(f"API is not available at {api_url}")
            return
        print(f"API is serving {response.json()['families']} label families")
    except requests.exceptions.RequestException:
        print(f"API is not available at {api_url}")
        return

    families = requests.get(f"{api_url}/families").json()
    for family in families:
        default = requests.get(f"{api_url}/families/{family}/default")
        if default.status_code == 200:
            print(f"{family} default: {default.json()['label']}")
        else:
            print(f"{family} has no default: {default.json()['detail']}")

    # Codes may be given in lower case
    response = requests.get(f"{api_url}/families/Framework/labels/django")
    if response.status_code == 200:
        label = response.json()
        print(f"Framework {label['system_label']}: {label['label']} (symbol {label['symbol']})")
    else:
        print(f"Lookup failed: {response.json()['detail']}")


if __name__ == "__main__":
    main()
