"""RegDesk - conference registration service"""
