"""SQL migration generators for PostgreSQL and SQL Server."""