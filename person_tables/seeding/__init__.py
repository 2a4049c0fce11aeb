"""Startup sample data generation."""

from person_tables.seeding.generator import SampleDataGenerator, SeedReport

__all__ = ["SampleDataGenerator", "SeedReport"]
