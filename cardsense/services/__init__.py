"""Services package: statement upload orchestration and statement file archiving."""
