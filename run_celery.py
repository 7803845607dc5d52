#!/usr/bin/env python3
"""
Script to run the Celery import worker.
"""
from celery_app import celery_app

if __name__ == "__main__":
    celery_app.worker_main(["worker", "--loglevel=INFO"])
