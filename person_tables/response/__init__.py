from person_tables.response.assembler import TableResponse, assemble, assemble_error, respond

__all__ = ["TableResponse", "assemble", "assemble_error", "respond"]
