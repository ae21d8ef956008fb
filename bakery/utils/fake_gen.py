from faker import Faker
from faker.providers import BaseProvider

PLACEHOLDER_IMAGE = 'https://placehold.co/{w}x{h}/f5e6d3/6b3e26?text={text}'


class BakeryProvider(BaseProvider):
    """
    烘焙店专用数据生成器
    生成蛋糕名、口味、活动场地等演示数据
    """

    flavours = [
        'Chocolate Truffle', 'Red Velvet', 'Black Forest', 'Butterscotch',
        'Pineapple', 'Blueberry Cheesecake', 'Mango Mousse', 'Rasmalai',
        'Coffee Walnut', 'Strawberry', 'Lotus Biscoff', 'Tiramisu'
    ]

    cake_types = ['Cake', 'Cupcakes', 'Brownie', 'Cookies', 'Cheesecake', 'Jar Cake', 'Tart']

    badges = ['Best Seller', 'New', 'Chef Special', 'Eggless', None, None]

    rate_categories = ['Cakes', 'Cupcakes', 'Cookies', 'Brownies', 'Desserts']

    venues = [
        'City Public School', 'Green Valley College', 'Sunrise Community Hall',
        'Riverside Mall', 'Oakwood Office Park', 'Central Library Lawn'
    ]

    blog_topics = [
        'How to Store Your Birthday Cake', 'Eggless Baking Secrets',
        'Choosing the Perfect Wedding Cake', 'Why We Love Dark Chocolate',
        'Behind the Scenes at Our Kitchen', 'Five Frosting Mistakes to Avoid'
    ]

    def cake_name(self):
        """生成蛋糕名"""
        return f"{self.random_element(self.flavours)} {self.random_element(self.cake_types)}"

    def cake_type(self):
        return self.random_element(self.cake_types)

    def menu_badge(self):
        return self.random_element(self.badges)

    def event_venue(self):
        return self.random_element(self.venues)

    def placeholder_image(self, width=800, height=600, text='Cocoa+%26+Cherry'):
        """占位图地址，演示数据不上传云存储"""
        return PLACEHOLDER_IMAGE.format(w=width, h=height, text=text)


# 初始化 Faker 并添加自定义 Provider
fake = Faker('en_IN')
fake.add_provider(BakeryProvider)
