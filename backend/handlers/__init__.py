"""Transport bindings (AWS Lambda, GCP Cloud Functions) over the shared dispatcher."""
