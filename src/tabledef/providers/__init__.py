"""
Remote warehouse backends for tabledef
"""
