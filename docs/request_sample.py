import os

import requests

url = "https://api-demo.airwallex.com/api/v1/beneficiaries/validate"

payload = {
    "beneficiary": {
        "entity_type": "COMPANY",
        "company_name": "Acme Pty Ltd",
        "bank_details": {
            "account_currency": "AUD",
            "account_name": "Acme Pty Ltd",
            "account_number": "123456789",
            "account_routing_type1": "bsb",
            "account_routing_value1": "083064",
            "bank_country_code": "AU"
        }
    },
    "payment_methods": ["LOCAL"],
    "transfer_methods": ["LOCAL"]
}
headers = {
    "content-type": "application/json",
    "authorization": f"Bearer {os.environ['AIRWALLEX_TOKEN']}",
    "user-agent": "awx-support-bene-upload/1.0"
}

response = requests.post(url, json=payload, headers=headers, timeout=30)

print(response.status_code, response.text)
