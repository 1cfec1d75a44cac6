"""delivery-qa: spreadsheet upload and AdSet question answering backend."""
