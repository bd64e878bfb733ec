"""Admin authentication for RegDesk"""
