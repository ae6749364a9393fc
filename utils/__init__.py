"""Support utilities: metrics, memory, reporting and result files"""
