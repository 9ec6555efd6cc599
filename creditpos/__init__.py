"""
creditpos - Credit Position Batch Retriever
============================================

Reads (action, client code, lot code) records from a workbook, asks the
retrieveCreditPosition SOAP service for each one, and stores the returned
messages as XML files.

Modules:
--------
- config.py      : Configuration management (loads settings from .env)
- loader.py      : Workbook reading and cell classification
- envelope.py    : SOAP request envelope
- http_client.py : SOAP transport over HTTP
- extractor.py   : Payload extraction from the SOAP response
- sink.py        : Output file operations
- error_log.py   : Timestamped error log file
- processor.py   : Batch processing
- run_batch.py   : Main entry point

Usage:
------
    python -m creditpos.run_batch
    python -m creditpos.run_batch input.xlsx --output positions.xml
    python -m creditpos.run_batch input.xlsx --dry-run

Output:
-------
- united_output_file.xml      : <messaggi> wrapping every record's payload
- united_output_file_<client>.xml : one file per record
- logError_<timestamp>.log    : one "Error: ..." line per error, if any
"""
