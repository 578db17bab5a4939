SERVICE_NAME = "link-preview"
